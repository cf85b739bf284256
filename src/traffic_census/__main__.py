import sys

from traffic_census.main import main


if __name__ == "__main__":
    sys.exit(main())
