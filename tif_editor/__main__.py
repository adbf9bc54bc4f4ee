"""
TIF Editor launcher: python -m tif_editor
"""

import sys

from tif_editor.editor import main

if __name__ == "__main__":
    sys.exit(main())
