from flappy_kiro.driver import main


if __name__ == "__main__":
    main()
