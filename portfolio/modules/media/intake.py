"""
Image Intake
============

Takes one selected image through validation, cropping, JPEG re-encoding and
upload, ending in a public URL.

    idle --select--> cropping --confirm--> rasterizing --encoded--> uploading --stored--> done
                        |                      |                        |
                        +--cancel--> idle      +--fail--> idle          +--fail--> idle

The preview handle opened on select is released on every path out of
cropping. ``on_complete`` runs once per successful upload, never otherwise.
"""

import io
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum

from PIL import Image, ImageOps, UnidentifiedImageError

from portfolio.core.storage import StorageError, base36_token
from .crop import CropRegion, CropRegionError, DEFAULT_ASPECT_RATIO
from .raster import JPEG_QUALITY, RasterizationError, rasterize

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 2 * 1024 * 1024  # 2MB
MAX_PIXELS = 40_000_000
ALLOWED_FILE_TYPES = ('image/jpeg', 'image/png', 'image/webp')
PREVIEW_EXTENSIONS = {'image/jpeg': 'jpg', 'image/png': 'png', 'image/webp': 'webp'}

# Name given to the re-encoded file; its extension becomes the object's
RASTER_FILENAME = 'cropped-image.jpg'
GENERIC_UPLOAD_ERROR = 'An error occurred while uploading the image'

# What the cropper may change; the aspect ratio is fixed per intake
CROP_FIELDS = {'x', 'y', 'width', 'height', 'unit'}


class IntakeError(Exception):
    """Base class for errors that end an intake attempt."""


class ImageValidationError(IntakeError):
    pass


class UploadError(IntakeError):
    pass


class IntakeStateError(IntakeError):
    """Operation not allowed in the intake's current state."""


class IntakeState(str, Enum):
    IDLE = 'idle'
    CROPPING = 'cropping'
    RASTERIZING = 'rasterizing'
    UPLOADING = 'uploading'
    DONE = 'done'


TRANSITIONS = {
    (IntakeState.IDLE, 'select'): IntakeState.CROPPING,
    (IntakeState.DONE, 'reset'): IntakeState.IDLE,
    (IntakeState.CROPPING, 'cancel'): IntakeState.IDLE,
    (IntakeState.CROPPING, 'confirm'): IntakeState.RASTERIZING,
    (IntakeState.RASTERIZING, 'encoded'): IntakeState.UPLOADING,
    (IntakeState.RASTERIZING, 'fail'): IntakeState.IDLE,
    (IntakeState.UPLOADING, 'stored'): IntakeState.DONE,
    (IntakeState.UPLOADING, 'fail'): IntakeState.IDLE,
}


def transition(state, event):
    """Next state for ``event``; raises IntakeStateError when not allowed"""
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise IntakeStateError(f"Cannot {event} while {state.value}") from None


@dataclass
class SelectedFile:
    filename: str
    media_type: str
    data: bytes

    @property
    def size(self):
        return len(self.data)

    @classmethod
    def from_upload(cls, file_storage):
        """Build from a werkzeug FileStorage (request.files entry)"""
        return cls(
            filename=file_storage.filename or '',
            media_type=file_storage.mimetype or '',
            data=file_storage.read(),
        )


@dataclass
class UploadedAsset:
    path: str
    url: str


def validate_file(file, max_size=MAX_FILE_SIZE, allowed_types=ALLOWED_FILE_TYPES):
    if file.size > max_size:
        raise ImageValidationError(f"File size must be smaller than {max_size // (1024 * 1024)}MB")
    if file.media_type not in allowed_types:
        raise ImageValidationError('Only JPG, PNG and WEBP formats are supported')


def image_path():
    """Storage path for a newly encoded image: random token + extension"""
    extension = RASTER_FILENAME.rsplit('.', 1)[-1]
    return f"{base36_token()}.{extension}"


class ImageIntake:
    """One intake handle. Re-usable: after done or an error it accepts a new file."""

    def __init__(self, blob_store, previews, on_complete=None,
                 aspect_ratio=DEFAULT_ASPECT_RATIO, max_size=MAX_FILE_SIZE,
                 quality=JPEG_QUALITY, max_pixels=MAX_PIXELS):
        self.id = base36_token()
        self.blob_store = blob_store
        self.previews = previews
        self.on_complete = on_complete
        self.aspect_ratio = aspect_ratio
        self.max_size = max_size
        self.quality = quality
        self.max_pixels = max_pixels

        self.state = IntakeState.IDLE
        self.touched_at = time.monotonic()
        self.last_error = None
        self.asset = None
        self.file = None
        self.preview = None
        self.crop = None
        self.natural_size = None
        self.display_size = None
        self._image = None
        # Guards check-then-transition against concurrent requests
        self._lock = threading.Lock()

    # ===== Operations =====

    def select_file(self, file):
        """Validate ``file`` and open the cropper on it.

        A second file is rejected while one is being cropped or uploaded.
        """
        with self._lock:
            self.touched_at = time.monotonic()
            if self.state == IntakeState.DONE:
                self.state = transition(self.state, 'reset')
            if self.state != IntakeState.IDLE:
                raise IntakeStateError('An image is already being processed')

            validate_file(file, self.max_size)
            image = self._decode(file.data)

            self.preview = self.previews.open(file.data, PREVIEW_EXTENSIONS[file.media_type])
            self.file = file
            self._image = image
            self.natural_size = image.size
            self.display_size = image.size
            self.crop = CropRegion.initial(self.display_size, self.aspect_ratio)
            self.asset = None
            self.last_error = None
            self.state = transition(self.state, 'select')
            return self.crop

    def set_display_size(self, width, height):
        """Record the size the preview is rendered at in the cropper"""
        self._require(IntakeState.CROPPING, 'resize')
        if not width or not height or width <= 0 or height <= 0:
            raise CropRegionError('Displayed size must be positive')
        self.display_size = (width, height)
        self.crop = self.crop.constrained(self.display_size)

    def update_crop(self, **changes):
        """Apply a drag/resize from the cropper and re-apply the constraints"""
        self._require(IntakeState.CROPPING, 'crop')
        unknown = set(changes) - CROP_FIELDS
        if unknown:
            raise CropRegionError(f"Unknown crop fields: {', '.join(sorted(unknown))}")

        self.touched_at = time.monotonic()
        current = self.crop
        # Fields left out keep their value, expressed in the unit of the update
        if changes.get('unit') and changes['unit'] != current.unit:
            current = current.to_unit(changes['unit'], self.display_size)
        self.crop = CropRegion(**{**current.to_dict(), **changes}).constrained(self.display_size)
        return self.crop

    def cancel(self):
        with self._lock:
            self.state = transition(self.state, 'cancel')
            self._release()

    def confirm(self, displayed_width=None, displayed_height=None):
        """Rasterize the selection, upload it and report the public URL.

        Only one confirm runs per selection; a second one arriving while the
        first is rasterizing or uploading gets IntakeStateError.
        """
        with self._lock:
            self._require(IntakeState.CROPPING, 'confirm')
            if displayed_width or displayed_height:
                self.set_display_size(displayed_width, displayed_height)

            self.touched_at = time.monotonic()
            self.state = transition(self.state, 'confirm')
        try:
            region = self.crop.to_pixels(self.display_size)
            raster = rasterize(self._image, region, self.natural_size, self.display_size, self.quality)
            self.state = transition(self.state, 'encoded')

            path = image_path()
            self.blob_store.upload(path, raster.data, overwrite=False, content_type=raster.content_type)
            url = self.blob_store.public_url(path)
        except StorageError as e:
            error = UploadError(e.message or GENERIC_UPLOAD_ERROR)
            self._fail(error)
            raise error from e
        except Exception as e:
            self._fail(e)
            raise

        self.asset = UploadedAsset(path=path, url=url)
        self.state = transition(self.state, 'stored')
        self._release()
        logger.info("Intake %s stored %s (%dx%d)", self.id, path, raster.width, raster.height)

        if self.on_complete:
            self.on_complete(url)
        return self.asset

    # ===== Internals =====

    def _require(self, state, action):
        if self.state != state:
            raise IntakeStateError(f"Cannot {action} while {self.state.value}")

    def _decode(self, data):
        try:
            image = Image.open(io.BytesIO(data))
        except Image.DecompressionBombError as e:
            raise ImageValidationError('Image dimensions are too large') from e
        except (UnidentifiedImageError, OSError) as e:
            raise ImageValidationError('File is not a readable image') from e

        # Checked from the header, before any pixel data is decoded
        width, height = image.size
        if width * height > self.max_pixels:
            image.close()
            raise ImageValidationError('Image dimensions are too large')

        try:
            image.load()
        except OSError as e:
            raise ImageValidationError('File is not a readable image') from e
        # Browsers show the EXIF-rotated image, so crop against that
        return ImageOps.exif_transpose(image)

    def _fail(self, error):
        logger.warning("Intake %s failed while %s: %s", self.id, self.state.value, error)
        self.last_error = str(error)
        self.state = transition(self.state, 'fail')
        self._release()

    def _release(self):
        if self.preview is not None:
            self.previews.release(self.preview)
            self.preview = None
        if self._image is not None:
            self._image.close()
            self._image = None
        self.file = None
        self.crop = None

    def to_dict(self):
        return {
            'id': self.id,
            'state': self.state.value,
            'aspect_ratio': self.aspect_ratio,
            'crop': self.crop.to_dict() if self.crop else None,
            'natural_size': list(self.natural_size) if self.natural_size else None,
            'display_size': list(self.display_size) if self.display_size else None,
            'preview_token': self.preview.token if self.preview else None,
            'image_url': self.asset.url if self.asset else None,
            'error': self.last_error,
        }


class IntakeRegistry:
    """Live intake handles for the admin UI, keyed by id"""

    def __init__(self, max_age=3600):
        self.max_age = max_age
        self._intakes = {}
        self._lock = threading.Lock()

    def create(self, **kwargs):
        self.prune()
        intake = ImageIntake(**kwargs)
        with self._lock:
            self._intakes[intake.id] = intake
        return intake

    def get(self, intake_id):
        with self._lock:
            return self._intakes.get(intake_id)

    def discard(self, intake_id):
        with self._lock:
            intake = self._intakes.pop(intake_id, None)
        if intake is not None and intake.state == IntakeState.CROPPING:
            intake.cancel()

    def prune(self):
        """Drop handles nobody has touched for ``max_age`` seconds"""
        cutoff = time.monotonic() - self.max_age
        with self._lock:
            stale = [i for i, intake in self._intakes.items() if intake.touched_at < cutoff]
        for intake_id in stale:
            self.discard(intake_id)
        return len(stale)

    def __len__(self):
        with self._lock:
            return len(self._intakes)
