"""
Page and grid geometry for ticket sheets.

All values are millimetres measured from the top-left corner of the page.
"""

# Standard Library
import math
import string

# local repo modules
import ticket_sheet_maker as tsm
import ticket_sheet_maker.config


GridLayout = tsm.config.GridLayout
SheetGeometry = tsm.config.SheetGeometry
TicketCell = tsm.config.TicketCell
TicketRange = tsm.config.TicketRange
CoverCrop = tsm.config.CoverCrop
InvalidRangeError = tsm.config.InvalidRangeError

PAGE_WIDTH_MM = tsm.config.PAGE_WIDTH_MM
PAGE_HEIGHT_MM = tsm.config.PAGE_HEIGHT_MM
PAGE_PADDING = tsm.config.PAGE_PADDING
GRID_GAP = tsm.config.GRID_GAP
GRID_LAYOUTS = tsm.config.GRID_LAYOUTS
DEFAULT_GRID = tsm.config.DEFAULT_GRID
DEFAULT_BORDER_COLOR = tsm.config.DEFAULT_BORDER_COLOR
NUMBER_MIN_DIGITS = tsm.config.NUMBER_MIN_DIGITS
NUMBER_PREFIX = tsm.config.NUMBER_PREFIX


#============================================
def get_grid_layout(tickets_per_page: int) -> GridLayout:
	"""
	Map a tickets-per-page density to a column and row count.

	Unsupported densities use the 2x3 grid. Pages still hold the requested
	number of tickets, leaving trailing cells empty; requests above the
	grid capacity, or below 1, are capped to the capacity.

	Args:
		tickets_per_page: Requested tickets per page.

	Returns:
		GridLayout.
	"""
	columns, rows = GRID_LAYOUTS.get(tickets_per_page, DEFAULT_GRID)
	capacity = columns * rows
	per_page = tickets_per_page
	if per_page < 1 or per_page > capacity:
		per_page = capacity
	return GridLayout(tickets_per_page=per_page, columns=columns, rows=rows)


#============================================
def validate_range(ticket_range: TicketRange) -> None:
	"""
	Reject empty ranges and numbers below 1.

	Args:
		ticket_range: Requested range.
	"""
	if ticket_range.start < 1:
		raise InvalidRangeError(f"Start number must be at least 1, got {ticket_range.start}")
	if ticket_range.count <= 0:
		raise InvalidRangeError(
			f"End number {ticket_range.end} is lower than start number {ticket_range.start}"
		)


#============================================
def count_pages(ticket_count: int, tickets_per_page: int) -> int:
	"""
	Count pages needed for a ticket batch.

	Args:
		ticket_count: Number of tickets.
		tickets_per_page: Cells per page.

	Returns:
		Page count.
	"""
	if ticket_count <= 0:
		return 0
	return math.ceil(ticket_count / tickets_per_page)


#============================================
def compute_cell_width(columns: int) -> float:
	"""
	Compute the ticket width for a column count.

	Args:
		columns: Grid columns.

	Returns:
		Cell width.
	"""
	grid_width = PAGE_WIDTH_MM - 2.0 * PAGE_PADDING
	return (grid_width - GRID_GAP * (columns - 1)) / columns


#============================================
def compute_ticket_height(cell_width: float, logo_aspect_ratio: float, has_custom_image: bool) -> float:
	"""
	Compute the ticket height from the content it has to hold.

	Every ticket in a run shares the same content shape, so this is
	evaluated once per generation.

	Args:
		cell_width: Ticket width.
		logo_aspect_ratio: Logo width / height.
		has_custom_image: Whether the image band is drawn.

	Returns:
		Ticket height.
	"""
	logo_height = cell_width * tsm.config.LOGO_BAND_WIDTH_FACTOR / logo_aspect_ratio
	logo_height = min(logo_height, tsm.config.LOGO_HEIGHT_LIMIT)

	image_height = 0.0
	spacings = tsm.config.SPACING_AFTER_TOP + tsm.config.SPACING_AFTER_LOGO + tsm.config.SPACING_AFTER_TEXT
	if has_custom_image:
		image_height = tsm.config.IMAGE_BAND_HEIGHT
		spacings += tsm.config.SPACING_AFTER_IMAGE

	content_height = (
		logo_height
		+ image_height
		+ tsm.config.TEXT_BLOCK_ESTIMATE
		+ tsm.config.NUMBER_BOX_HEIGHT
		+ spacings
	)
	return content_height + tsm.config.TICKET_INNER_PADDING


#============================================
def compute_sheet_geometry(
	tickets_per_page: int,
	logo_aspect_ratio: float,
	has_custom_image: bool,
) -> SheetGeometry:
	"""
	Compute the shared grid geometry for a generation run.

	Args:
		tickets_per_page: Requested tickets per page.
		logo_aspect_ratio: Logo width / height.
		has_custom_image: Whether the image band is drawn.

	Returns:
		SheetGeometry.
	"""
	grid = get_grid_layout(tickets_per_page)
	cell_width = compute_cell_width(grid.columns)
	cell_height = compute_ticket_height(cell_width, logo_aspect_ratio, has_custom_image)
	grid_height = grid.rows * cell_height + GRID_GAP * (grid.rows - 1)
	start_y = (PAGE_HEIGHT_MM - grid_height) / 2.0
	return SheetGeometry(
		grid=grid,
		cell_width=cell_width,
		cell_height=cell_height,
		start_y=start_y,
		grid_height=grid_height,
	)


#============================================
def compute_cell_origin(geometry: SheetGeometry, row: int, col: int) -> tuple[float, float]:
	"""
	Compute the top-left corner of a grid cell.

	Args:
		geometry: Sheet geometry.
		row: Row index.
		col: Column index.

	Returns:
		Tuple of (x, y).
	"""
	x = PAGE_PADDING + col * (geometry.cell_width + GRID_GAP)
	y = geometry.start_y + row * (geometry.cell_height + GRID_GAP)
	return (x, y)


#============================================
def paginate(ticket_range: TicketRange, geometry: SheetGeometry) -> list[list[TicketCell]]:
	"""
	Assign every ticket number to a page and cell.

	Cells fill rows left to right, then the next row, then the next page.

	Args:
		ticket_range: Validated ticket range.
		geometry: Sheet geometry.

	Returns:
		Pages, each a list of TicketCell entries.
	"""
	per_page = geometry.grid.tickets_per_page
	numbers = ticket_range.numbers()
	pages: list[list[TicketCell]] = []
	for page_start in range(0, len(numbers), per_page):
		page_index = len(pages)
		cells: list[TicketCell] = []
		for cell_index, number in enumerate(numbers[page_start:page_start + per_page]):
			row = cell_index // geometry.grid.columns
			col = cell_index % geometry.grid.columns
			x, y = compute_cell_origin(geometry, row, col)
			cells.append(
				TicketCell(
					number=number,
					page_index=page_index,
					cell_index=cell_index,
					row=row,
					column=col,
					x=x,
					y=y,
					width=geometry.cell_width,
					height=geometry.cell_height,
				)
			)
		pages.append(cells)
	return pages


#============================================
def fit_logo(cell_width: float, cell_height: float, aspect_ratio: float) -> tuple[float, float]:
	"""
	Fit the logo inside its caps without stretching it.

	Args:
		cell_width: Ticket width.
		cell_height: Ticket height.
		aspect_ratio: Logo width / height.

	Returns:
		Tuple of (width, height).
	"""
	max_width = cell_width * tsm.config.LOGO_MAX_WIDTH_FRACTION
	max_height = cell_height * tsm.config.LOGO_MAX_HEIGHT_FRACTION
	width = max_width
	height = width / aspect_ratio
	if height > max_height:
		height = max_height
		width = height * aspect_ratio
	return (width, height)


#============================================
def compute_cover_crop(
	aspect_ratio: float,
	band_width: float,
	band_height: float,
	position_x: float,
	position_y: float,
) -> CoverCrop:
	"""
	Compute an object-fit cover placement with an object-position offset.

	The image is scaled to fill the band on both axes, keeping its aspect
	ratio. The overflow on each axis is cropped so that position 0 keeps
	the leading edge and position 100 keeps the trailing edge.

	Args:
		aspect_ratio: Image width / height.
		band_width: Target width.
		band_height: Target height.
		position_x: Horizontal position percentage.
		position_y: Vertical position percentage.

	Returns:
		CoverCrop with the rendered size and the crop offsets.
	"""
	rendered_width = band_width
	rendered_height = rendered_width / aspect_ratio
	if rendered_height < band_height:
		rendered_height = band_height
		rendered_width = rendered_height * aspect_ratio
	offset_x = (position_x / 100.0) * (rendered_width - band_width)
	offset_y = (position_y / 100.0) * (rendered_height - band_height)
	return CoverCrop(
		rendered_width=rendered_width,
		rendered_height=rendered_height,
		offset_x=offset_x,
		offset_y=offset_y,
	)


#============================================
def format_ticket_number(number: int) -> str:
	"""
	Format a sequence number as shown in the number box.

	Args:
		number: Ticket number.

	Returns:
		Text such as "N° 003".
	"""
	return f"{NUMBER_PREFIX} {number:0{NUMBER_MIN_DIGITS}d}"


#============================================
def parse_hex_color(value: str | None) -> tuple[int, int, int]:
	"""
	Parse a hex color string into an RGB triple.

	Args:
		value: Color string like "#0EA5E9" or "0EA5E9".

	Returns:
		Tuple of (r, g, b) in 0-255, or the default border color when
		the string is not six hex digits.
	"""
	if not value:
		return DEFAULT_BORDER_COLOR
	digits = value.strip()
	if digits.startswith("#"):
		digits = digits[1:]
	if len(digits) != 6 or any(char not in string.hexdigits for char in digits):
		return DEFAULT_BORDER_COLOR
	red = int(digits[0:2], 16)
	green = int(digits[2:4], 16)
	blue = int(digits[4:6], 16)
	return (red, green, blue)


#============================================
def build_output_name(ticket_range: TicketRange) -> str:
	"""
	Build the default document name for a range.

	Args:
		ticket_range: Ticket range.

	Returns:
		File name like "Tickets_1-6.pdf".
	"""
	return f"Tickets_{ticket_range.start}-{ticket_range.end}.pdf"
