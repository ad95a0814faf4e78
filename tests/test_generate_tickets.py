import json
import pathlib

import PIL.Image
import pypdf
import pytest

import ticket_sheet_maker.config
import ticket_sheet_maker.generator
import ticket_sheet_maker.images
import ticket_sheet_maker.render


config = ticket_sheet_maker.config
generator = ticket_sheet_maker.generator


#============================================
def build_job(start: int, end: int, **kwargs) -> config.TicketJob:
	"""
	Build a job that never touches the network.
	"""
	kwargs.setdefault("logo_source", None)
	return config.TicketJob(ticket_range=config.TicketRange(start=start, end=end), **kwargs)


#============================================
def read_page_texts(path: pathlib.Path) -> list[str]:
	reader = pypdf.PdfReader(str(path))
	return [page.extract_text() or "" for page in reader.pages]


#============================================
def test_single_page_batch(tmp_path: pathlib.Path) -> None:
	"""
	Tickets 1-6 at 6 per page produce one A4 page with six numbers.
	"""
	output_path = tmp_path / "tickets.pdf"
	result = generator.generate_tickets(build_job(1, 6), output_path, verbose=False)
	assert result.pages == 1
	assert result.total_tickets == 6
	assert (result.columns, result.rows) == (2, 3)
	assert output_path.exists()

	reader = pypdf.PdfReader(str(output_path))
	assert len(reader.pages) == 1
	box = reader.pages[0].mediabox
	assert float(box.width) == pytest.approx(595.2756, abs=0.01)
	assert float(box.height) == pytest.approx(841.8898, abs=0.01)
	text = read_page_texts(output_path)[0]
	for number in range(1, 7):
		assert f"{number:03d}" in text
	assert "REFRIGERIO" in text


#============================================
def test_overflow_batch_has_two_pages(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "tickets.pdf"
	result = generator.generate_tickets(build_job(1, 7), output_path, verbose=False)
	assert result.pages == 2
	texts = read_page_texts(output_path)
	assert len(texts) == 2
	assert "006" in texts[0]
	assert "007" not in texts[0]
	assert "007" in texts[1]
	assert "001" not in texts[1]


#============================================
@pytest.mark.parametrize("tickets_per_page, pages", [(4, 3), (5, 3), (8, 2), (9, 2)])
def test_density_sets_page_count(tmp_path: pathlib.Path, tickets_per_page: int, pages: int) -> None:
	output_path = tmp_path / "tickets.pdf"
	job = build_job(1, 12, tickets_per_page=tickets_per_page)
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert result.pages == pages
	assert len(pypdf.PdfReader(str(output_path)).pages) == pages


#============================================
def test_large_numbers_are_not_truncated(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "tickets.pdf"
	generator.generate_tickets(build_job(998, 1001, tickets_per_page=4), output_path, verbose=False)
	text = read_page_texts(output_path)[0]
	assert "998" in text
	assert "1001" in text


#============================================
def test_default_output_name(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.chdir(tmp_path)
	result = generator.generate_tickets(build_job(3, 5), verbose=False)
	assert result.output_path == pathlib.Path("Tickets_3-5.pdf")
	assert (tmp_path / "Tickets_3-5.pdf").exists()


#============================================
def test_invalid_range_produces_nothing(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "tickets.pdf"
	with pytest.raises(config.InvalidRangeError):
		generator.generate_tickets(build_job(10, 3), output_path, verbose=False)
	assert not output_path.exists()


#============================================
def test_malformed_border_color_still_generates(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "tickets.pdf"
	job = build_job(1, 2, style=config.TicketStyle(border_color="not-a-color"))
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert result.pages == 1
	assert output_path.exists()


#============================================
def test_logo_and_custom_image(tmp_path: pathlib.Path, logo_png: bytes, band_png: bytes) -> None:
	output_path = tmp_path / "tickets.pdf"
	job = build_job(
		1,
		6,
		logo_source=logo_png,
		custom_image=config.CustomImage(source=band_png, position_x=0, position_y=100),
	)
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert result.logo_used
	assert result.custom_image_used

	plain = generator.generate_tickets(build_job(1, 6), tmp_path / "plain.pdf", verbose=False)
	expected_extra = config.IMAGE_BAND_HEIGHT + config.SPACING_AFTER_IMAGE
	assert result.cell_height == pytest.approx(plain.cell_height + expected_extra)


#============================================
def test_bad_custom_image_is_skipped(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	output_path = tmp_path / "tickets.pdf"
	job = build_job(1, 3, custom_image=config.CustomImage(source=b"\x00\x01broken"))
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert not result.custom_image_used
	assert output_path.exists()
	assert "Warning: skipping custom image" in capsys.readouterr().out


#============================================
def test_oversized_custom_image_is_skipped(
	tmp_path: pathlib.Path,
	monkeypatch: pytest.MonkeyPatch,
	capsys: pytest.CaptureFixture,
	band_png: bytes,
) -> None:
	monkeypatch.setattr(PIL.Image, "MAX_IMAGE_PIXELS", 1000)
	output_path = tmp_path / "tickets.pdf"
	job = build_job(1, 3, custom_image=config.CustomImage(source=band_png))
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert not result.custom_image_used
	assert output_path.exists()
	assert "Warning: skipping custom image" in capsys.readouterr().out


#============================================
def test_crop_failure_keeps_empty_band(
	tmp_path: pathlib.Path,
	monkeypatch: pytest.MonkeyPatch,
	capsys: pytest.CaptureFixture,
	band_png: bytes,
) -> None:
	"""
	A failed crop still generates the sheet with the band reserved.
	"""
	def broken_crop(*args, **kwargs):
		raise config.ImageResolutionError("cannot resample")

	monkeypatch.setattr(ticket_sheet_maker.images, "crop_cover_image", broken_crop)
	output_path = tmp_path / "tickets.pdf"
	job = build_job(1, 6, custom_image=config.CustomImage(source=band_png))
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert output_path.exists()
	assert result.pages == 1
	plain = generator.generate_tickets(build_job(1, 6), tmp_path / "plain.pdf", verbose=False)
	expected_extra = config.IMAGE_BAND_HEIGHT + config.SPACING_AFTER_IMAGE
	assert result.cell_height == pytest.approx(plain.cell_height + expected_extra)
	assert "Warning: skipping custom image crop" in capsys.readouterr().out


#============================================
def test_missing_logo_uses_default_aspect_ratio(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "tickets.pdf"
	job = build_job(1, 2, logo_source=tmp_path / "no_logo_here.png")
	result = generator.generate_tickets(job, output_path, verbose=False)
	assert not result.logo_used
	reference = generator.generate_tickets(build_job(1, 2), tmp_path / "ref.pdf", verbose=False)
	assert result.cell_height == pytest.approx(reference.cell_height)


#============================================
def test_composition_failure_releases_no_document(
	tmp_path: pathlib.Path,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	def broken_compose(*args, **kwargs):
		raise RuntimeError("surface exploded")

	monkeypatch.setattr(ticket_sheet_maker.render, "compose_document", broken_compose)
	output_path = tmp_path / "tickets.pdf"
	ticket_generator = generator.TicketGenerator(verbose=False)
	with pytest.raises(config.GenerationError) as excinfo:
		ticket_generator.generate(build_job(1, 6), output_path)
	assert isinstance(excinfo.value.__cause__, RuntimeError)
	assert not output_path.exists()
	assert not ticket_generator.is_generating


#============================================
def test_generator_refuses_reentry(tmp_path: pathlib.Path) -> None:
	ticket_generator = generator.TicketGenerator(verbose=False)
	ticket_generator.is_generating = True
	with pytest.raises(config.GenerationInProgressError):
		ticket_generator.generate(build_job(1, 6), tmp_path / "tickets.pdf")
	assert not (tmp_path / "tickets.pdf").exists()

	ticket_generator.is_generating = False
	result = ticket_generator.generate(build_job(1, 6), tmp_path / "tickets.pdf")
	assert result.pages == 1
	assert not ticket_generator.is_generating


#============================================
def test_manifest_describes_sheet(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "tickets.pdf"
	job = build_job(5, 13, tickets_per_page=9, style=config.TicketStyle(text="CENA", border_color="#112233"))
	result = generator.generate_tickets(job, output_path, verbose=False)
	manifest_path = tmp_path / "tickets.json"
	generator.write_manifest(manifest_path, job, result)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["pages"] == 1
	assert data["total_tickets"] == 9
	assert data["range"] == {"start": 5, "end": 13}
	assert data["layout"]["columns"] == 3
	assert data["layout"]["rows"] == 3
	assert data["style"]["border_color"] == [17, 34, 51]
	assert data["image_position"] is None
