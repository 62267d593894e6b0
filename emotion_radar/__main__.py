import sys

from emotion_radar.cli import main

sys.exit(main())
