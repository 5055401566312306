# main.py
import argparse
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Rashtriya Kisan Manch registration wizard")
    parser.add_argument("--config", type=Path, help="path to config.yaml")
    parser.add_argument("--lang", choices=("en", "hi"), help="interface language")
    args = parser.parse_args()

    from config import load_settings
    from app import KisanManchWizard
    app = KisanManchWizard(settings=load_settings(args.config))
    if args.lang:
        app.lang.set_language(args.lang)
    app.run()
    sys.exit(0)

if __name__ == "__main__":
    main()
