import sys
import os
import time

# Ensure the 'src' directory is on sys.path when executing as a script
SRC_DIR = os.path.dirname(__file__)
if SRC_DIR and SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

# pyexiv2 must be imported before any Qt imports on Windows
import pyexiv2  # noqa: E402, F401

import logging  # noqa: E402
import argparse  # noqa: E402
import traceback  # noqa: E402  # For global exception handler

from PyQt6.QtWidgets import QApplication, QMessageBox  # noqa: E402


# --- Global Exception Handler ---
def global_exception_handler(exc_type, exc_value, exc_traceback):
    """Handles any unhandled exception, logs it, and shows an error dialog."""
    if issubclass(exc_type, KeyboardInterrupt):
        logging.info("Application terminated by user.")
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    error_message_details = "".join(
        traceback.format_exception(exc_type, exc_value, exc_traceback)
    )
    logging.critical(f"Unhandled exception occurred:\n{error_message_details}")

    app_instance = QApplication.instance()
    main_error_text = (
        f"A critical error occurred: {str(exc_value)}\n\n"
        "The application may become unstable or need to close."
    )

    if app_instance:
        try:
            error_box = QMessageBox()
            error_box.setIcon(QMessageBox.Icon.Critical)
            error_box.setWindowTitle("Application Error")
            error_box.setText(main_error_text)
            error_box.setDetailedText(error_message_details)
            error_box.setStandardButtons(QMessageBox.StandardButton.Ok)
            error_box.exec()
        except Exception as e_msgbox:
            logging.error(
                f"Failed to display error dialog: {str(e_msgbox)}\nOriginal error:\n{error_message_details}"
            )


def setup_logging():
    """Configure the root logger: console always, file when enabled by env var."""
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:  # Iterate over a copy
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(levelname)-8s - [%(name)s] - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if sys.stderr is not None:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(console_handler)

    enable_file_logging_env = os.environ.get("PHOTOMETA_ENABLE_FILE_LOGGING", "false")
    want_file_logging = enable_file_logging_env.lower() == "true" or sys.stderr is None
    root_logger.setLevel(logging.DEBUG)
    if want_file_logging:
        try:
            log_file_path = os.path.join(
                os.path.expanduser("~"), ".photometa_logs", "photometa_app.log"
            )
            os.makedirs(os.path.dirname(log_file_path), exist_ok=True)
            file_handler = logging.FileHandler(log_file_path, mode="a")
            file_handler.setFormatter(formatter)
            file_handler.setLevel(logging.DEBUG)
            root_logger.addHandler(file_handler)
            logging.info(f"File logging enabled: {log_file_path}")
        except Exception as e_file_log:
            logging.error(
                f"Failed to initialize file logging: {e_file_log}", exc_info=True
            )
            root_logger.setLevel(logging.INFO)
    else:
        logging.info(
            "File logging disabled. To enable, set PHOTOMETA_ENABLE_FILE_LOGGING=true."
        )

    # --- Suppress verbose third-party loggers ---
    logging.getLogger("PyQt6").setLevel(logging.INFO)


def main():
    """Main application entry point."""
    app = QApplication(sys.argv)

    parser = argparse.ArgumentParser(description="PhotoMeta")
    parser.add_argument("images", nargs="*", help="Image files to open")
    parser.add_argument("--folder", type=str, help="Open all images in a folder")
    args = parser.parse_args()

    setup_logging()
    sys.excepthook = global_exception_handler
    logging.debug("Global exception hook set.")

    main_start_time = time.perf_counter()
    logging.info("Application starting...")

    from ui.main_window import MainWindow, collect_image_paths

    image_paths = list(args.images) + collect_image_paths(args.folder)
    window = MainWindow(image_paths=image_paths)
    window.show()

    logging.info(
        f"Application setup complete in {time.perf_counter() - main_start_time:.4f}s. Entering event loop."
    )
    exit_code = app.exec()
    logging.info(f"Application exited with code {exit_code}.")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
