import sys

from commit_agent.cli import main

sys.exit(main())
