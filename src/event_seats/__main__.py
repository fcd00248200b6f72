import sys

from event_seats.cli import main

sys.exit(main())
