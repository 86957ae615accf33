from PySide6.QtCore import QThread, Signal

from roundcounter.core.visitor_counter import VisitorCounter


class VisitorCountWorker(QThread):
    done = Signal(int)  # 0 = unavailable

    def __init__(self, counter: VisitorCounter):
        super().__init__()
        self.counter = counter

    def run(self):
        # increment_and_get never raises
        self.done.emit(int(self.counter.increment_and_get()))
