import sys

from PySide6.QtWidgets import QApplication, QMainWindow

from .constants import APP_NAME
from .modules.reporting.controller import ReportingController
from .repositories.api_client import ApiClient
from .repositories.reporting_repo import ReportingRepo
from .utils.loggers import get_logger


class MainWindow(QMainWindow):
    def __init__(self, repo: ReportingRepo):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(1200, 760)
        self.reporting = ReportingController(repo)
        self.setCentralWidget(self.reporting.get_widget())


def main():
    log = get_logger()

    # Check if QApplication already exists (embedding / tests)
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    api = ApiClient()
    log.info("Connecting to %s", api.base_url)
    win = MainWindow(ReportingRepo(api))
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
