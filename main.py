# Usage: mpiexec -n <P> python main.py [rows cols]
from invaders.cli import main

if __name__ == "__main__":
    main()
