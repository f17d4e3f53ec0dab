import sys

from event_pipeline.app import main

sys.exit(main())
