
import sys
from os import path

DEPSMITH_DIR = path.dirname(path.abspath(__file__))
DEPSMITH_DIR = path.normpath(path.join(DEPSMITH_DIR, path.pardir, 'src'))

if DEPSMITH_DIR not in sys.path:
    sys.path.insert(1, DEPSMITH_DIR)
