# game_saver_cli.py
# -*- coding: utf-8 -*-

import argparse
import os
import sys
import logging
import platform

from colorama import Fore, Style, init

import config
import core_logic
import settings_manager
import save_path_finder
from editor_session import EditorSession, SessionIO
from errors import SaveEditorError, WriteError

# --- Colored print helpers ---

def print_title(text):
    """Prints a title in bright green, framed like the game's banner."""
    bar = "=" * 100
    print(f"\n{Style.BRIGHT}{Fore.GREEN}{bar}")
    print(f"{Style.BRIGHT}{Fore.GREEN}{text.upper().center(100)}")
    print(f"{Style.BRIGHT}{Fore.GREEN}{bar}\n")

def print_header(text):
    """Prints a section header in bright cyan."""
    print(f"\n{Style.BRIGHT}{Fore.CYAN}--- {text} ---{Style.RESET_ALL}")

def print_option(key, text):
    """Prints a menu option."""
    print(f"  {Style.BRIGHT}{Fore.YELLOW}{key}{Style.RESET_ALL}. {text}")

def print_info(text):
    """Prints standard information (white/default)."""
    print(text)

def print_success(text):
    """Prints a success message in green."""
    print(f"{Fore.GREEN}{text}")

def print_warning(text):
    """Prints a warning message in yellow."""
    print(f"{Fore.YELLOW}WARNING: {text}")

def print_error(text):
    """Prints an error message in bright red."""
    print(f"{Style.BRIGHT}{Fore.RED}ERROR: {text}")

def get_input(prompt):
    """Gets user input with a specific prompt style."""
    try:
        return input(f"{Style.BRIGHT}{Fore.WHITE}> {prompt}{Style.RESET_ALL} ")
    except EOFError:
        print_error("\nInput stream closed unexpectedly. Exiting.")
        sys.exit(1)

def clear_screen():
    """Clears the terminal screen."""
    os.system('cls' if platform.system() == "Windows" else 'clear')


class ConsoleIO(SessionIO):
    """SessionIO on top of the colored console helpers."""

    def prompt(self, text):
        return get_input(text)

    def title(self, text):
        print_title(text)

    def header(self, text):
        print_header(text)

    def option(self, key, text):
        print_option(key, text)

    def info(self, text):
        print_info(text)

    def success(self, text):
        print_success(text)

    def warning(self, text):
        print_warning(text)

    def error(self, text):
        print_error(text)


def configure_logging(log_dir=None):
    """File log at INFO, console at WARNING so menus stay readable."""
    log_format = '%(asctime)s - %(levelname)s - %(message)s'
    log_datefmt = '%H:%M:%S'
    log_formatter = logging.Formatter(log_format, log_datefmt)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.WARNING)
    root_logger.addHandler(console_handler)

    log_dir = log_dir or config.get_app_data_folder()
    try:
        file_handler = logging.FileHandler(os.path.join(log_dir, config.LOG_FILENAME), encoding='utf-8')
        file_handler.setFormatter(log_formatter)
        file_handler.setLevel(logging.INFO)
        root_logger.addHandler(file_handler)
    except OSError as e:
        logging.warning(f"Could not open log file in '{log_dir}': {e}")

    logging.info("Logging configured.")


def run_editor(io, settings):
    """Startup checks plus the editing session. Returns the process exit code."""
    backup_dir = settings.get("backup_base_dir", config.BACKUP_FOLDER)
    if core_logic.ensure_backup_dir(backup_dir):
        io.info(f"Created backup folder at: {os.path.abspath(backup_dir)}")

    try:
        save_root = save_path_finder.find_save_root(settings.get("save_root"))
        io.success(f"Found save folder at: {save_root}")
        session = EditorSession(io, save_root, settings)
        return session.run()
    except WriteError as e:
        io.error(f"Error saving changes: {e}")
        return 1
    except SaveEditorError as e:
        io.error(f"{e}")
        return 1


def main(argv=None):
    parser = argparse.ArgumentParser(description=f"{config.GAME_NAME} save editor.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.APP_VERSION}")
    parser.parse_args(argv)

    init(autoreset=True)
    clear_screen()
    configure_logging()
    print_title(f"{config.GAME_NAME} Modder")

    settings, first_launch = settings_manager.load_settings()
    if first_launch and not settings_manager.save_settings(settings):
        print_warning("Unable to save default settings.")

    io = ConsoleIO()
    try:
        exit_code = run_editor(io, settings)
    except KeyboardInterrupt:
        print_info("\nInterrupted. Exiting without saving changes.")
        exit_code = 0
    logging.info(f"Save editor finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
