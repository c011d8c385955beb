"""python -m awx 진입점"""

from awx.cli.app import main

if __name__ == "__main__":
    main()
