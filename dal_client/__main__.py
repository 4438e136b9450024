import sys

from dal_client.cli import main

sys.exit(main())
