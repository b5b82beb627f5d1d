# Main.py
""""" Entry point for the Units Calculator.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load configuration and start the Qt GUI

"""""
import sys
import logging
from pathlib import Path
from unitscalc import config_manager as config_manager, UI as UI

logger = logging.getLogger("unitscalc")


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent


def check_files_exist():

    """
      Fail fast in development if required files are missing / moved / renamed.
      In production (.exe) the files are embedded by the bundler, so the check is skipped.
    """

    package_dir = PROJECT_ROOT / "unitscalc"

    REQUIRED = [
        package_dir / "UI.py",
        package_dir / "Calculator.py",
        package_dir / "Tokenizer.py",
        package_dir / "Parser.py",
        package_dir / "Formatter.py",
        package_dir / "config_manager.py",
        package_dir / "config.json",
        package_dir / "ui_strings.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        logger.error("The following files are missing or in the wrong location: %s", ", ".join(missing_files))
        sys.exit(1)


def main():

    """
    Load configuration and start the GUI.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_setting_value("all")
    logger.info("Config loaded: %s", all_settings)

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        logger.info("Developer Mode: Checking file paths...")
        check_files_exist()
    else:
        logger.info("Production mode (.exe) is starting...")
    main()
