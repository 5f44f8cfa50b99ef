"""
CLI entry point, when used as a module: `python -m ktables`.

Useful for debugging in the IDEs (use the start-mode "Module", module "ktables").
"""
from ktables import cli

if __name__ == '__main__':
    cli.main()
