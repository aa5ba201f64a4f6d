import os
import logging

logger = logging.getLogger(__name__)


class ThumbManager:
    """Maintenance operations on the thumbnails target directory."""

    def __init__(self, config):
        self.config = config

    def get_all(self):
        """Returns the names of all thumbnails, sorted."""
        if not os.path.isdir(self.config.target):
            return []
        return sorted(
            name
            for name in os.listdir(self.config.target)
            if not name.startswith(".") and os.path.isfile(os.path.join(self.config.target, name))
        )

    def _clear(self, files):
        for name in files:
            os.remove(os.path.join(self.config.target, name))
        return len(files)

    def clear_all(self, files=None):
        """Deletes ``files`` (all thumbnails by default) and returns the count."""
        if files is None:
            files = self.get_all()
        count = self._clear(files)
        logger.info("Deleted %d thumbnails from %s", count, self.config.target)
        return count
