from .constants import CLONE_VIA_NAME
from .main import main

main(prog_name=CLONE_VIA_NAME)
