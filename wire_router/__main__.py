"""
Entry point for wire-router CLI
"""

from route import main

if __name__ == '__main__':
    main()
