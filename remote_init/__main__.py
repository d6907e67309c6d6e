from remote_init.cli import main

if __name__ == "__main__":
    main()
