from json2pg.cli import main


if __name__ == "__main__":
    main()
