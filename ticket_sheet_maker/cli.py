"""
CLI entry points for ticket sheet generation.
"""

# Standard Library
import argparse
import pathlib
import sys
import time

# local repo modules
import ticket_sheet_maker as tsm
import ticket_sheet_maker.config
import ticket_sheet_maker.generator
import ticket_sheet_maker.layout


TicketJob = tsm.config.TicketJob
TicketRange = tsm.config.TicketRange
TicketStyle = tsm.config.TicketStyle
CustomImage = tsm.config.CustomImage

DEFAULT_TICKET_TEXT = tsm.config.DEFAULT_TICKET_TEXT
DEFAULT_BORDER_COLOR_HEX = tsm.config.DEFAULT_BORDER_COLOR_HEX
DEFAULT_TICKETS_PER_PAGE = tsm.config.DEFAULT_TICKETS_PER_PAGE
DEFAULT_IMAGE_POSITION = tsm.config.DEFAULT_IMAGE_POSITION
DEFAULT_LOGO_URL = tsm.config.DEFAULT_LOGO_URL


#============================================
def clamp_position(value: float) -> float:
	"""
	Clamp an image position percentage to 0-100.

	Args:
		value: Requested percentage.

	Returns:
		Clamped percentage.
	"""
	return max(0.0, min(100.0, value))


#============================================
def build_job(args: argparse.Namespace) -> TicketJob:
	"""
	Build a ticket job from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		TicketJob.
	"""
	custom_image = None
	if args.image:
		custom_image = CustomImage(
			source=args.image,
			position_x=clamp_position(args.image_position_x),
			position_y=clamp_position(args.image_position_y),
		)
	logo_source = args.logo
	if args.no_logo:
		logo_source = None
	return TicketJob(
		ticket_range=TicketRange(start=args.start, end=args.end),
		tickets_per_page=args.tickets_per_page,
		style=TicketStyle(text=args.text, border_color=args.border_color),
		custom_image=custom_image,
		logo_source=logo_source,
	)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render numbered meal tickets into an A4 PDF.")

	range_group = parser.add_argument_group("Range")
	range_group.add_argument("-s", "--start", dest="start", type=int, default=1, help="First ticket number.")
	range_group.add_argument("-e", "--end", dest="end", type=int, default=6, help="Last ticket number.")

	content_group = parser.add_argument_group("Content")
	content_group.add_argument("-t", "--text", dest="text", default=DEFAULT_TICKET_TEXT, help="Ticket text.")
	content_group.add_argument(
		"-b",
		"--border-color",
		dest="border_color",
		default=DEFAULT_BORDER_COLOR_HEX,
		help="Border color as six hex digits.",
	)
	content_group.add_argument(
		"-k",
		"--tickets-per-page",
		dest="tickets_per_page",
		type=int,
		choices=sorted(tsm.config.GRID_LAYOUTS),
		default=DEFAULT_TICKETS_PER_PAGE,
		help="Tickets per A4 page.",
	)

	image_group = parser.add_argument_group("Images")
	image_group.add_argument("-i", "--image", dest="image", default=None, help="Custom image path or URL.")
	image_group.add_argument(
		"-x",
		"--image-position-x",
		dest="image_position_x",
		type=float,
		default=DEFAULT_IMAGE_POSITION,
		help="Horizontal image position, 0-100.",
	)
	image_group.add_argument(
		"-y",
		"--image-position-y",
		dest="image_position_y",
		type=float,
		default=DEFAULT_IMAGE_POSITION,
		help="Vertical image position, 0-100.",
	)
	image_group.add_argument("--logo", dest="logo", default=DEFAULT_LOGO_URL, help="Logo path or URL.")
	image_group.add_argument("-L", "--no-logo", dest="no_logo", action="store_true", help="Do not draw a logo.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument(
		"--dry-run",
		dest="dry_run",
		action="store_true",
		help="Print the ticket and page totals without rendering.",
	)
	behavior_group.add_argument("-q", "--quiet", dest="verbose", action="store_false", help="Hide progress output.")

	parser.set_defaults(
		no_logo=False,
		dry_run=False,
		verbose=True,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> int:
	"""
	Run the generation from parsed args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Process exit code.
	"""
	job = build_job(args)
	ticket_range = job.ticket_range
	output_path = args.output_path
	if output_path is None:
		output_path = tsm.layout.build_output_name(ticket_range)

	grid = tsm.layout.get_grid_layout(job.tickets_per_page)
	print("Ticket sheet generation")
	print(f"Range: {ticket_range.start}-{ticket_range.end}")
	print(f"Total tickets: {max(0, ticket_range.count)}")
	print(f"Grid: {grid.columns}x{grid.rows}")
	print(f"Pages needed: {tsm.layout.count_pages(ticket_range.count, grid.tickets_per_page)}")
	if args.dry_run:
		print("Dry run: nothing rendered.")
		return 0
	print(f"Output PDF: {output_path}")

	start_time = time.perf_counter()
	try:
		result = tsm.generator.generate_tickets(job, output_path, verbose=args.verbose)
	except tsm.config.InvalidRangeError as error:
		print(f"Error: {error}", file=sys.stderr)
		return 2
	except tsm.config.GenerationError as error:
		print(f"Error: {error}", file=sys.stderr)
		return 1
	total_time = time.perf_counter() - start_time

	print(f"Pages written: {result.pages}")
	print(f"Tickets printed: {result.total_tickets}")
	print(f"Logo: {'yes' if result.logo_used else 'no'}")
	print(f"Custom image: {'yes' if result.custom_image_used else 'no'}")
	if args.manifest_path:
		manifest_path = pathlib.Path(args.manifest_path)
		tsm.generator.write_manifest(manifest_path, job, result)
		print(f"Manifest written: {manifest_path}")
	print(f"Timing: total={total_time:.2f}s")
	return 0


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	sys.exit(run_pipeline(args))
