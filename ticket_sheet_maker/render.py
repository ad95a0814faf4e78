"""
Drawing ticket sheets onto a reportlab canvas.

Geometry comes in as millimetres from the top-left corner of the page and
is converted to PDF points (bottom-left origin) at the draw call.
"""

# Standard Library
import dataclasses
import io

# PIP3 modules
import reportlab.lib.pagesizes
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import ticket_sheet_maker as tsm
import ticket_sheet_maker.config
import ticket_sheet_maker.layout


TicketCell = tsm.config.TicketCell

PAGE_HEIGHT_MM = tsm.config.PAGE_HEIGHT_MM
PROGRESS_BAR_WIDTH = tsm.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = tsm.config.PROGRESS_UPDATE_EVERY
mm_to_points = tsm.config.mm_to_points


@dataclasses.dataclass
class TicketAssets:
	"""
	Everything shared by every ticket of one run.
	"""
	text: str
	border_color: tuple[int, int, int]
	logo: reportlab.lib.utils.ImageReader | None = None
	logo_aspect_ratio: float = tsm.config.DEFAULT_LOGO_ASPECT_RATIO
	band_image: reportlab.lib.utils.ImageReader | None = None
	has_image_band: bool = False


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def pdf_x(x: float) -> float:
	return mm_to_points(x)


def pdf_y(y: float) -> float:
	return mm_to_points(PAGE_HEIGHT_MM - y)


#============================================
def set_stroke(pdf: reportlab.pdfgen.canvas.Canvas, color: tuple[int, int, int], width: float) -> None:
	"""
	Set stroke color from 0-255 values and line width in millimetres.
	"""
	pdf.setStrokeColorRGB(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
	pdf.setLineWidth(mm_to_points(width))


def set_fill(pdf: reportlab.pdfgen.canvas.Canvas, color: tuple[int, int, int]) -> None:
	pdf.setFillColorRGB(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)


#============================================
def draw_line(pdf: reportlab.pdfgen.canvas.Canvas, x1: float, y1: float, x2: float, y2: float) -> None:
	pdf.line(pdf_x(x1), pdf_y(y1), pdf_x(x2), pdf_y(y2))


#============================================
def draw_dashed_line(
	pdf: reportlab.pdfgen.canvas.Canvas,
	x1: float,
	y1: float,
	x2: float,
	y2: float,
) -> None:
	"""
	Draw a horizontal or vertical line as separate dash segments.

	Args:
		pdf: ReportLab canvas.
		x1: Start x.
		y1: Start y.
		x2: End x.
		y2: End y.
	"""
	step = tsm.config.DASH_LENGTH + tsm.config.DASH_GAP
	if y1 == y2:
		position = x1
		while position < x2:
			end = min(position + tsm.config.DASH_LENGTH, x2)
			draw_line(pdf, position, y1, end, y1)
			position += step
		return
	position = y1
	while position < y2:
		end = min(position + tsm.config.DASH_LENGTH, y2)
		draw_line(pdf, x1, position, x1, end)
		position += step


#============================================
def draw_dashed_rect(
	pdf: reportlab.pdfgen.canvas.Canvas,
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw a rectangle outline from manual dash segments.

	Args:
		pdf: ReportLab canvas.
		x: Left edge.
		y: Top edge.
		width: Rectangle width.
		height: Rectangle height.
	"""
	draw_dashed_line(pdf, x, y, x + width, y)
	draw_dashed_line(pdf, x, y + height, x + width, y + height)
	draw_dashed_line(pdf, x, y, x, y + height)
	draw_dashed_line(pdf, x + width, y, x + width, y + height)


#============================================
def draw_ticket_border(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	color: tuple[int, int, int],
) -> None:
	"""
	Draw the rounded ticket outline.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		color: Border RGB.
	"""
	set_stroke(pdf, color, tsm.config.BORDER_LINE_WIDTH)
	pdf.roundRect(
		pdf_x(cell.x),
		pdf_y(cell.y + cell.height),
		mm_to_points(cell.width),
		mm_to_points(cell.height),
		mm_to_points(tsm.config.BORDER_RADIUS),
		stroke=1,
		fill=0,
	)


#============================================
def draw_corner_accents(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	color: tuple[int, int, int],
) -> None:
	"""
	Draw an L-shaped accent on each ticket corner.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		color: Accent RGB.
	"""
	set_stroke(pdf, color, tsm.config.CORNER_LINE_WIDTH)
	size = tsm.config.CORNER_SIZE
	left = cell.x
	right = cell.x + cell.width
	top = cell.y
	bottom = cell.y + cell.height
	# (corner x, corner y, inward x direction, inward y direction)
	corners = (
		(left, top, 1.0, 1.0),
		(right, top, -1.0, 1.0),
		(left, bottom, 1.0, -1.0),
		(right, bottom, -1.0, -1.0),
	)
	for corner_x, corner_y, step_x, step_y in corners:
		draw_line(pdf, corner_x, corner_y, corner_x + step_x * size, corner_y)
		draw_line(pdf, corner_x, corner_y, corner_x, corner_y + step_y * size)


#============================================
def draw_image_box(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image: reportlab.lib.utils.ImageReader,
	x: float,
	y: float,
	width: float,
	height: float,
) -> None:
	"""
	Draw an image into a box given by its top-left corner.
	"""
	pdf.drawImage(
		image,
		pdf_x(x),
		pdf_y(y + height),
		width=mm_to_points(width),
		height=mm_to_points(height),
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
def draw_logo(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	assets: TicketAssets,
	cursor_y: float,
) -> float:
	"""
	Draw the centered logo and advance the cursor.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		assets: Shared ticket assets.
		cursor_y: Current top position.

	Returns:
		New cursor position.
	"""
	if assets.logo is None:
		return cursor_y
	width, height = tsm.layout.fit_logo(cell.width, cell.height, assets.logo_aspect_ratio)
	logo_x = cell.x + (cell.width - width) / 2.0
	draw_image_box(pdf, assets.logo, logo_x, cursor_y, width, height)
	return cursor_y + height + tsm.config.SPACING_AFTER_LOGO


#============================================
def draw_image_band(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	assets: TicketAssets,
	cursor_y: float,
) -> float:
	"""
	Draw the colored band with the pre-cropped custom image.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		assets: Shared ticket assets.
		cursor_y: Current top position.

	Returns:
		New cursor position.
	"""
	if not assets.has_image_band:
		return cursor_y
	band_x = cell.x + tsm.config.IMAGE_BAND_INSET
	band_width = cell.width - 2.0 * tsm.config.IMAGE_BAND_INSET
	band_height = tsm.config.IMAGE_BAND_HEIGHT
	set_fill(pdf, tsm.config.IMAGE_BAND_COLOR)
	pdf.rect(
		pdf_x(band_x),
		pdf_y(cursor_y + band_height),
		mm_to_points(band_width),
		mm_to_points(band_height),
		stroke=0,
		fill=1,
	)
	if assets.band_image is not None:
		draw_image_box(pdf, assets.band_image, band_x, cursor_y, band_width, band_height)
	return cursor_y + band_height + tsm.config.SPACING_AFTER_IMAGE


#============================================
def wrap_ticket_text(text: str, width: float) -> list[str]:
	"""
	Wrap ticket text to a width in millimetres.

	Args:
		text: Ticket text.
		width: Available width.

	Returns:
		Wrapped lines; empty text still occupies one blank line.
	"""
	lines = reportlab.lib.utils.simpleSplit(
		text,
		tsm.config.TEXT_FONT,
		tsm.config.TEXT_FONT_SIZE,
		mm_to_points(width),
	)
	return lines or [""]


#============================================
def draw_ticket_text(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	assets: TicketAssets,
	cursor_y: float,
) -> float:
	"""
	Draw the centered ticket text and advance the cursor.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		assets: Shared ticket assets.
		cursor_y: Baseline of the first line.

	Returns:
		New cursor position.
	"""
	lines = wrap_ticket_text(assets.text, cell.width - tsm.config.TEXT_SIDE_INSET)
	pdf.setFont(tsm.config.TEXT_FONT, tsm.config.TEXT_FONT_SIZE)
	set_fill(pdf, tsm.config.TEXT_COLOR)
	center_x = cell.x + cell.width / 2.0
	for index, line in enumerate(lines):
		baseline = cursor_y + index * tsm.config.TEXT_LINE_HEIGHT
		pdf.drawCentredString(pdf_x(center_x), pdf_y(baseline), line)
	return cursor_y + len(lines) * tsm.config.TEXT_LINE_HEIGHT + tsm.config.SPACING_AFTER_TEXT


#============================================
def draw_number_box(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	cursor_y: float,
) -> None:
	"""
	Draw the dashed box holding the sequence number.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		cursor_y: Top of the box.
	"""
	box_width = tsm.config.NUMBER_BOX_WIDTH
	box_x = cell.x + (cell.width - box_width) / 2.0
	set_stroke(pdf, tsm.config.DASH_COLOR, tsm.config.DASH_LINE_WIDTH)
	draw_dashed_rect(pdf, box_x, cursor_y, box_width, tsm.config.NUMBER_BOX_HEIGHT)

	pdf.setFont(tsm.config.NUMBER_FONT, tsm.config.NUMBER_FONT_SIZE)
	set_fill(pdf, tsm.config.NUMBER_COLOR)
	pdf.drawCentredString(
		pdf_x(cell.x + cell.width / 2.0),
		pdf_y(cursor_y + tsm.config.NUMBER_BASELINE_OFFSET),
		tsm.layout.format_ticket_number(cell.number),
	)


#============================================
def draw_ticket(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: TicketCell,
	assets: TicketAssets,
) -> None:
	"""
	Draw one ticket, top to bottom.

	Args:
		pdf: ReportLab canvas.
		cell: Ticket cell.
		assets: Shared ticket assets.
	"""
	draw_ticket_border(pdf, cell, assets.border_color)
	draw_corner_accents(pdf, cell, assets.border_color)
	cursor_y = cell.y + tsm.config.SPACING_AFTER_TOP
	cursor_y = draw_logo(pdf, cell, assets, cursor_y)
	cursor_y = draw_image_band(pdf, cell, assets, cursor_y)
	cursor_y = draw_ticket_text(pdf, cell, assets, cursor_y)
	draw_number_box(pdf, cell, cursor_y)


#============================================
def compose_document(
	pages: list[list[TicketCell]],
	assets: TicketAssets,
	title: str,
	verbose: bool = True,
) -> bytes:
	"""
	Draw all pages into an in-memory PDF.

	Args:
		pages: Paginated ticket cells.
		assets: Shared ticket assets.
		title: Document title.
		verbose: Print a progress bar.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=reportlab.lib.pagesizes.A4)
	pdf.setTitle(title)
	pdf.setCreator("ticket-sheet-maker")

	total = sum(len(cells) for cells in pages)
	drawn = 0
	if verbose and total > 0:
		print_progress("Tickets", 0, total)
	for cells in pages:
		for cell in cells:
			draw_ticket(pdf, cell, assets)
			drawn += 1
			if verbose and (drawn % PROGRESS_UPDATE_EVERY == 0 or drawn == total):
				print_progress("Tickets", drawn, total)
		pdf.showPage()
	if verbose and total > 0:
		print()
	pdf.save()
	return buffer.getvalue()
