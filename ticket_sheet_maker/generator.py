"""
Ticket sheet generation: validation, image resolution, composition, output.
"""

# Standard Library
import json
import pathlib

# local repo modules
import ticket_sheet_maker as tsm
import ticket_sheet_maker.config
import ticket_sheet_maker.images
import ticket_sheet_maker.layout
import ticket_sheet_maker.render


TicketJob = tsm.config.TicketJob
GenerationResult = tsm.config.GenerationResult
GenerationError = tsm.config.GenerationError
GenerationInProgressError = tsm.config.GenerationInProgressError
ResolvedImage = tsm.images.ResolvedImage
TicketAssets = tsm.render.TicketAssets

DEFAULT_LOGO_ASPECT_RATIO = tsm.config.DEFAULT_LOGO_ASPECT_RATIO


#============================================
def build_assets(
	job: TicketJob,
	geometry: tsm.config.SheetGeometry,
	logo: ResolvedImage | None,
	custom: ResolvedImage | None,
) -> TicketAssets:
	"""
	Prepare the drawable assets shared by every ticket.

	Args:
		job: Ticket job.
		geometry: Sheet geometry.
		logo: Resolved logo or None.
		custom: Resolved custom image or None.

	Returns:
		TicketAssets.
	"""
	assets = TicketAssets(
		text=job.style.text,
		border_color=tsm.layout.parse_hex_color(job.style.border_color),
	)
	if logo is not None:
		assets.logo = tsm.images.to_image_reader(logo.image)
		assets.logo_aspect_ratio = logo.aspect_ratio
	if custom is not None:
		# geometry already reserves the band, so keep it even without pixels
		assets.has_image_band = True
		band_width = geometry.cell_width - 2.0 * tsm.config.IMAGE_BAND_INSET
		try:
			cropped = tsm.images.crop_cover_image(
				custom,
				band_width,
				tsm.config.IMAGE_BAND_HEIGHT,
				job.custom_image.position_x,
				job.custom_image.position_y,
			)
		except tsm.config.ImageResolutionError as error:
			print(f"Warning: skipping custom image crop: {error}")
			return assets
		assets.band_image = tsm.images.to_image_reader(cropped)
	return assets


#============================================
class TicketGenerator:
	"""
	Runs one ticket sheet generation at a time.

	is_generating is set for the duration of generate() so a second
	request made while one is running is refused.
	"""

	def __init__(self, verbose: bool = True):
		self.verbose = verbose
		self.is_generating = False

	#============================================
	def generate(self, job: TicketJob, output_path: pathlib.Path | str | None = None) -> GenerationResult:
		"""
		Generate the ticket PDF for a job.

		Args:
			job: Ticket job.
			output_path: Output PDF path, defaults to Tickets_{start}-{end}.pdf.

		Returns:
			GenerationResult.

		Raises:
			InvalidRangeError: When the range is empty.
			GenerationInProgressError: When called while already generating.
			GenerationError: When composing or writing the document fails.
		"""
		tsm.layout.validate_range(job.ticket_range)
		if self.is_generating:
			raise GenerationInProgressError("A ticket sheet is already being generated")
		if output_path is None:
			output_path = tsm.layout.build_output_name(job.ticket_range)
		output_path = pathlib.Path(output_path)

		self.is_generating = True
		try:
			return self._run(job, output_path)
		finally:
			self.is_generating = False

	#============================================
	def _run(self, job: TicketJob, output_path: pathlib.Path) -> GenerationResult:
		logo = tsm.images.resolve_optional_image(job.logo_source, "logo")
		custom = None
		if job.custom_image is not None:
			custom = tsm.images.resolve_optional_image(job.custom_image.source, "custom image")

		logo_aspect_ratio = DEFAULT_LOGO_ASPECT_RATIO
		if logo is not None:
			logo_aspect_ratio = logo.aspect_ratio
		geometry = tsm.layout.compute_sheet_geometry(
			job.tickets_per_page,
			logo_aspect_ratio,
			custom is not None,
		)
		pages = tsm.layout.paginate(job.ticket_range, geometry)

		try:
			assets = build_assets(job, geometry, logo, custom)
			data = tsm.render.compose_document(
				pages,
				assets,
				output_path.stem,
				verbose=self.verbose,
			)
			output_path.write_bytes(data)
		except Exception as error:
			raise GenerationError(f"Could not generate {output_path.name}: {error}") from error

		return GenerationResult(
			output_path=output_path,
			total_tickets=job.ticket_range.count,
			pages=len(pages),
			tickets_per_page=geometry.grid.tickets_per_page,
			columns=geometry.grid.columns,
			rows=geometry.grid.rows,
			cell_width=geometry.cell_width,
			cell_height=geometry.cell_height,
			logo_used=logo is not None,
			custom_image_used=custom is not None,
		)


#============================================
def generate_tickets(
	job: TicketJob,
	output_path: pathlib.Path | str | None = None,
	verbose: bool = True,
) -> GenerationResult:
	"""
	Generate a ticket PDF with a fresh generator.

	Args:
		job: Ticket job.
		output_path: Output PDF path.
		verbose: Print progress output.

	Returns:
		GenerationResult.
	"""
	return TicketGenerator(verbose=verbose).generate(job, output_path)


#============================================
def write_manifest(manifest_path: pathlib.Path, job: TicketJob, result: GenerationResult) -> None:
	"""
	Write a manifest JSON file describing a generated sheet.

	Args:
		manifest_path: Output path.
		job: Ticket job.
		result: Generation result.
	"""
	custom_image = job.custom_image
	data = {
		"output": str(result.output_path),
		"range": {
			"start": job.ticket_range.start,
			"end": job.ticket_range.end,
		},
		"total_tickets": result.total_tickets,
		"pages": result.pages,
		"tickets_per_page": result.tickets_per_page,
		"layout": {
			"columns": result.columns,
			"rows": result.rows,
			"cell_width_mm": round(result.cell_width, 3),
			"cell_height_mm": round(result.cell_height, 3),
			"page_padding_mm": tsm.config.PAGE_PADDING,
			"grid_gap_mm": tsm.config.GRID_GAP,
		},
		"style": {
			"text": job.style.text,
			"border_color": list(tsm.layout.parse_hex_color(job.style.border_color)),
		},
		"logo_used": result.logo_used,
		"custom_image_used": result.custom_image_used,
		"image_position": None,
		"fonts": {
			"text": tsm.config.TEXT_FONT,
			"number": tsm.config.NUMBER_FONT,
		},
	}
	if custom_image is not None:
		data["image_position"] = {"x": custom_image.position_x, "y": custom_image.position_y}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
