"""
Image loading and raster cropping for logos and ticket images.
"""

# Standard Library
import base64
import dataclasses
import io
import pathlib
import urllib.request

# PIP3 modules
import PIL.Image
import reportlab.lib.utils

# local repo modules
import ticket_sheet_maker as tsm
import ticket_sheet_maker.config
import ticket_sheet_maker.layout


ImageResolutionError = tsm.config.ImageResolutionError
MM_PER_INCH = tsm.config.MM_PER_INCH
IMAGE_RASTER_DPI = tsm.config.IMAGE_RASTER_DPI
URL_TIMEOUT_SECONDS = tsm.config.URL_TIMEOUT_SECONDS

ImageSource = bytes | str | pathlib.Path


@dataclasses.dataclass
class ResolvedImage:
	image: PIL.Image.Image
	width: int
	height: int

	@property
	def aspect_ratio(self) -> float:
		return self.width / self.height


#============================================
def is_url(value: str) -> bool:
	"""
	Check whether a string names an http(s) resource.

	Args:
		value: Source string.

	Returns:
		True for http and https URLs.
	"""
	lowered = value.strip().lower()
	return lowered.startswith("http://") or lowered.startswith("https://")


#============================================
def decode_data_url(value: str) -> bytes:
	"""
	Decode a base64 data URL.

	Args:
		value: String like "data:image/png;base64,....".

	Returns:
		Decoded bytes.
	"""
	header, _, payload = value.partition(",")
	if not header.endswith(";base64"):
		raise ImageResolutionError("Only base64 data URLs are supported")
	return base64.b64decode(payload, validate=True)


#============================================
def read_image_bytes(source: ImageSource) -> bytes:
	"""
	Read raw image bytes from any supported source.

	Args:
		source: Raw bytes, file path, data URL or http(s) URL.

	Returns:
		Image file bytes.
	"""
	if isinstance(source, bytes):
		return source
	if isinstance(source, pathlib.Path):
		return source.read_bytes()
	if source.startswith("data:"):
		return decode_data_url(source)
	if is_url(source):
		request = urllib.request.Request(source, headers={"User-Agent": "ticket-sheet-maker"})
		with urllib.request.urlopen(request, timeout=URL_TIMEOUT_SECONDS) as response:
			return response.read()
	return pathlib.Path(source).read_bytes()


#============================================
def load_image(source: ImageSource) -> ResolvedImage:
	"""
	Load and decode an image so its pixel size is known.

	Args:
		source: Raw bytes, file path, data URL or http(s) URL.

	Returns:
		ResolvedImage.

	Raises:
		ImageResolutionError: When the source cannot be read or decoded.
	"""
	try:
		data = read_image_bytes(source)
		image = PIL.Image.open(io.BytesIO(data))
		image.load()
	except (OSError, ValueError, PIL.Image.DecompressionBombError) as error:
		raise ImageResolutionError(f"Could not load image: {error}") from error
	width, height = image.size
	if width <= 0 or height <= 0:
		raise ImageResolutionError(f"Image has no pixels: {width}x{height}")
	return ResolvedImage(image=normalize_mode(image), width=width, height=height)


#============================================
def describe_source(source: ImageSource) -> str:
	"""
	Describe an image source for status messages.

	Args:
		source: Image source.

	Returns:
		Short description.
	"""
	if isinstance(source, bytes):
		return f"<{len(source)} bytes>"
	text = str(source)
	if text.startswith("data:"):
		return "<data URL>"
	return text


#============================================
def resolve_optional_image(source: ImageSource | None, role: str) -> ResolvedImage | None:
	"""
	Load an image, reporting failure and returning None instead of raising.

	Args:
		source: Image source or None.
		role: Name used in the warning, such as "logo".

	Returns:
		ResolvedImage or None.
	"""
	if source is None:
		return None
	try:
		return load_image(source)
	except ImageResolutionError as error:
		print(f"Warning: skipping {role} {describe_source(source)}: {error}")
		return None


#============================================
def normalize_mode(image: PIL.Image.Image) -> PIL.Image.Image:
	"""
	Convert an image to RGB, or RGBA when it carries transparency.

	Args:
		image: Decoded image.

	Returns:
		Image in RGB or RGBA mode.
	"""
	if image.mode in ("RGB", "RGBA"):
		return image
	if image.mode in ("LA", "PA") or "transparency" in image.info:
		return image.convert("RGBA")
	return image.convert("RGB")


#============================================
def crop_cover_image(
	resolved: ResolvedImage,
	band_width: float,
	band_height: float,
	position_x: float,
	position_y: float,
	dpi: int = IMAGE_RASTER_DPI,
) -> PIL.Image.Image:
	"""
	Rasterize the visible part of a cover-fitted image.

	Args:
		resolved: Source image.
		band_width: Band width in millimetres.
		band_height: Band height in millimetres.
		position_x: Horizontal position percentage.
		position_y: Vertical position percentage.
		dpi: Raster resolution of the output buffer.

	Returns:
		Image sized to the band at the given resolution.

	Raises:
		ImageResolutionError: When the source pixels cannot be resampled.
	"""
	crop = tsm.layout.compute_cover_crop(
		resolved.aspect_ratio,
		band_width,
		band_height,
		position_x,
		position_y,
	)
	# source pixels per rendered millimetre, identical on both axes
	scale = resolved.width / crop.rendered_width
	box = (
		max(0.0, crop.offset_x * scale),
		max(0.0, crop.offset_y * scale),
		min(float(resolved.width), (crop.offset_x + band_width) * scale),
		min(float(resolved.height), (crop.offset_y + band_height) * scale),
	)
	size = (
		max(1, int(round(band_width / MM_PER_INCH * dpi))),
		max(1, int(round(band_height / MM_PER_INCH * dpi))),
	)
	try:
		return resolved.image.resize(size, resample=PIL.Image.Resampling.LANCZOS, box=box)
	except (OSError, ValueError) as error:
		raise ImageResolutionError(f"Could not crop image: {error}") from error


#============================================
def to_image_reader(image: PIL.Image.Image) -> reportlab.lib.utils.ImageReader:
	"""
	Wrap a PIL image for drawing on a reportlab canvas.

	Args:
		image: PIL image.

	Returns:
		ImageReader instance.
	"""
	return reportlab.lib.utils.ImageReader(image)
