from flappy_dragon.game import main


if __name__ == "__main__":
    main()
