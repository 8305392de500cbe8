from tutortrack.export import content_disposition, export_filename


def test_export_filename_replaces_each_whitespace_character():
	assert export_filename("Intro to  Astronomy", "pdf") == "Intro_to__Astronomy.pdf"
	assert export_filename("Unit\t1\nReview", "docx") == "Unit_1_Review.docx"


def test_export_filename_keeps_non_ascii_titles():
	assert export_filename('Matemáticas 数学 "Intro"', "pdf") == 'Matemáticas_数学_"Intro".pdf'


def test_content_disposition_plain_ascii():
	header = content_disposition("Intro_to__Astronomy.pdf")
	assert header == "attachment; filename=\"Intro_to__Astronomy.pdf\"; filename*=UTF-8''Intro_to__Astronomy.pdf"


def test_content_disposition_strips_quotes_and_encodes_utf8():
	header = content_disposition('Matemáticas_数学_"Intro".docx')
	assert 'filename="Matematicas__Intro.docx"' in header
	assert "filename*=UTF-8''Matem%C3%A1ticas_%E6%95%B0%E5%AD%A6_%22Intro%22.docx" in header
	header.encode("latin-1")


def test_content_disposition_drops_backslashes_and_control_characters():
	assert 'filename="ab.pdf"' in content_disposition("a\\b\x07.pdf")


def test_content_disposition_falls_back_when_nothing_ascii_is_left():
	assert 'filename="curriculum.pdf"' in content_disposition("数学.pdf")
