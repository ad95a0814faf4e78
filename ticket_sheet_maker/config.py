"""
Shared configuration, job types and errors.
"""

# Standard Library
import dataclasses
import pathlib


MM_PER_INCH = 25.4
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0

PAGE_PADDING = 8.0
GRID_GAP = 6.0

GRID_LAYOUTS = {
	4: (2, 2),
	6: (2, 3),
	8: (2, 4),
	9: (3, 3),
}
DEFAULT_TICKETS_PER_PAGE = 6
DEFAULT_GRID = (2, 3)

DEFAULT_TICKET_TEXT = "VALE PARA 1 REFRIGERIO"
DEFAULT_BORDER_COLOR_HEX = "#0EA5E9"
DEFAULT_BORDER_COLOR = (14, 165, 233)
DEFAULT_IMAGE_POSITION = 50
DEFAULT_LOGO_URL = "https://cloud.unheval.edu.pe/public/imagenes/genericos/unheval.png"
DEFAULT_LOGO_ASPECT_RATIO = 3.5
URL_TIMEOUT_SECONDS = 15.0

# content-derived ticket height terms
LOGO_HEIGHT_LIMIT = 25.0
LOGO_BAND_WIDTH_FACTOR = 0.75
TEXT_BLOCK_ESTIMATE = 12.0
IMAGE_BAND_HEIGHT = 15.0
NUMBER_BOX_WIDTH = 45.0
NUMBER_BOX_HEIGHT = 14.0
SPACING_AFTER_TOP = 4.0
SPACING_AFTER_LOGO = 5.0
SPACING_AFTER_IMAGE = 4.0
SPACING_AFTER_TEXT = 8.0
TICKET_INNER_PADDING = 8.0

# drawn logo caps, relative to the cell
LOGO_MAX_WIDTH_FRACTION = 0.80
LOGO_MAX_HEIGHT_FRACTION = 0.30

BORDER_RADIUS = 1.5
BORDER_LINE_WIDTH = 0.8
CORNER_SIZE = 3.5
CORNER_LINE_WIDTH = 0.5
IMAGE_BAND_INSET = 3.0
IMAGE_BAND_COLOR = (251, 191, 36)
IMAGE_RASTER_DPI = 300

TEXT_FONT = "Helvetica-Bold"
TEXT_FONT_SIZE = 11.0
TEXT_COLOR = (30, 41, 59)
TEXT_SIDE_INSET = 10.0
TEXT_LINE_HEIGHT = 4.0

NUMBER_FONT = "Helvetica-Bold"
NUMBER_FONT_SIZE = 20.0
NUMBER_COLOR = (15, 23, 42)
NUMBER_BASELINE_OFFSET = 9.5
NUMBER_MIN_DIGITS = 3
NUMBER_PREFIX = "N°"

DASH_LENGTH = 2.0
DASH_GAP = 2.0
DASH_LINE_WIDTH = 0.25
DASH_COLOR = (203, 213, 225)

PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10


#============================================
class TicketSheetError(Exception):
	"""
	Base error for ticket sheet generation.
	"""


class InvalidRangeError(TicketSheetError, ValueError):
	"""
	Raised when the ticket range is empty or starts below 1.
	"""


class ImageResolutionError(TicketSheetError):
	"""
	Raised when an image source cannot be read or decoded.
	"""


class GenerationError(TicketSheetError):
	"""
	Raised when composing the document fails.
	"""


class GenerationInProgressError(TicketSheetError):
	"""
	Raised when a generator is asked to start while already running.
	"""


@dataclasses.dataclass(frozen=True)
class TicketRange:
	start: int
	end: int

	@property
	def count(self) -> int:
		return self.end - self.start + 1

	def numbers(self) -> list[int]:
		return list(range(self.start, self.end + 1))


@dataclasses.dataclass(frozen=True)
class TicketStyle:
	text: str = DEFAULT_TICKET_TEXT
	border_color: str = DEFAULT_BORDER_COLOR_HEX


@dataclasses.dataclass(frozen=True)
class CustomImage:
	"""
	Optional image shown in the colored band of every ticket.

	source is raw bytes, a file path, a data: URL or an http(s) URL.
	position_x and position_y are percentages (0-100) of the overflow
	that is cropped away on each axis.
	"""
	source: bytes | str | pathlib.Path
	position_x: float = DEFAULT_IMAGE_POSITION
	position_y: float = DEFAULT_IMAGE_POSITION


@dataclasses.dataclass(frozen=True)
class TicketJob:
	ticket_range: TicketRange
	tickets_per_page: int = DEFAULT_TICKETS_PER_PAGE
	style: TicketStyle = TicketStyle()
	custom_image: CustomImage | None = None
	logo_source: bytes | str | pathlib.Path | None = DEFAULT_LOGO_URL


@dataclasses.dataclass(frozen=True)
class GridLayout:
	tickets_per_page: int
	columns: int
	rows: int


@dataclasses.dataclass(frozen=True)
class TicketCell:
	number: int
	page_index: int
	cell_index: int
	row: int
	column: int
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class SheetGeometry:
	grid: GridLayout
	cell_width: float
	cell_height: float
	start_y: float
	grid_height: float


@dataclasses.dataclass(frozen=True)
class CoverCrop:
	rendered_width: float
	rendered_height: float
	offset_x: float
	offset_y: float


@dataclasses.dataclass
class GenerationResult:
	output_path: pathlib.Path
	total_tickets: int
	pages: int
	tickets_per_page: int
	columns: int
	rows: int
	cell_width: float
	cell_height: float
	logo_used: bool
	custom_image_used: bool


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to PDF points.

	Args:
		value: Millimetre value.

	Returns:
		Points value.
	"""
	return value * 72.0 / MM_PER_INCH
