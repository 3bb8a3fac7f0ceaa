import logging

import cv2

logger = logging.getLogger(__name__)

QUIT_KEYS = (27, ord("q"))  # Esc, q


class WindowHost:
    """
    Live preview in an OpenCV window.

    Acts as the frame scheduler (one pending frame callback, run after the
    previous frame has been shown) and as the resize notifier (polls the
    window's image rect and reports size changes to listeners).
    """

    def __init__(self, surface, title="Starfield"):
        self.surface = surface
        self.title = title
        self._callback = None
        self._handle = 0
        self._listeners = []
        self._size = None
        self._open = False

    def open(self):
        cv2.namedWindow(self.title, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.title, self.surface.width, self.surface.height)
        self._size = (self.surface.width, self.surface.height)
        self._open = True

    def close(self):
        if self._open:
            cv2.destroyWindow(self.title)
            self._open = False

    def request_frame(self, callback):
        self._handle += 1
        self._callback = (self._handle, callback)
        return self._handle

    def cancel_frame(self, handle):
        if self._callback is not None and self._callback[0] == handle:
            self._callback = None

    def add_resize_listener(self, listener):
        self._listeners.append(listener)

    def remove_resize_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _poll_size(self):
        try:
            _, _, width, height = cv2.getWindowImageRect(self.title)
        except cv2.error:
            return
        if width <= 0 or height <= 0 or (width, height) == self._size:
            return
        self._size = (width, height)
        logger.debug(f"[i] Window resized to {width}x{height}")
        for listener in list(self._listeners):
            listener(width, height)

    def _window_closed(self):
        try:
            return cv2.getWindowProperty(self.title, cv2.WND_PROP_VISIBLE) < 1
        except cv2.error:
            return True

    def run(self):
        """Show frames until the window is closed, a quit key is pressed or nothing is scheduled."""
        if not self._open:
            self.open()
        try:
            while self._callback is not None:
                _, callback = self._callback
                self._callback = None
                callback()
                if self.surface.released:
                    break

                cv2.imshow(self.title, self.surface.frame)
                key = cv2.waitKey(1) & 0xFF
                if key in QUIT_KEYS or self._window_closed():
                    logger.info("[+] Preview closed")
                    break
                self._poll_size()
        finally:
            self.close()
