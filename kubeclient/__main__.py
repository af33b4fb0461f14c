"""
CLI entry point, when used as a module: `python -m kubeclient`.
"""
from kubeclient import cli

if __name__ == '__main__':
    cli.main()
