from tokeninfo.core.main import main

if __name__ == '__main__':
    main()
