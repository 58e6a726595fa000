import sys

from invoice_api.cli import main

sys.exit(main())
