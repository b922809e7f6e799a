from src.column.mainColumn import main


if __name__ == "__main__":
    main()
