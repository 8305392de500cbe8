"""Curriculum export to PDF (reportlab) and Word (python-docx)."""
from __future__ import annotations
import io
import re
import unicodedata
from typing import List
from urllib.parse import quote
from xml.sax.saxutils import escape

from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from .flows.curriculum import CreateCurriculumOutput

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def export_filename(title: str, extension: str) -> str:
	stem = re.sub(r"\s", "_", title)
	return f"{stem}.{extension}"


def content_disposition(filename: str) -> str:
	"""Attachment header with an ASCII fallback and the UTF-8 name (RFC 6266)."""
	fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
	fallback = re.sub(r'["\\\x00-\x1f\x7f]', "", fallback)
	if fallback.startswith(".") or not fallback:
		fallback = "curriculum" + fallback
	return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _bullets(items: List[str], style: ParagraphStyle) -> ListFlowable:
	return ListFlowable(
		[ListItem(Paragraph(escape(item), style), leftIndent=12) for item in items],
		bulletType="bullet",
		leftIndent=12,
	)


def curriculum_to_pdf(curriculum: CreateCurriculumOutput) -> bytes:
	styles = getSampleStyleSheet()
	heading_style = ParagraphStyle(
		'ModuleHeading', parent=styles['Heading2'],
		fontSize=14, spaceAfter=6, spaceBefore=12
	)
	label_style = ParagraphStyle('Label', parent=styles['Normal'], fontName='Helvetica-Bold', spaceBefore=6)
	normal_style = styles['Normal']

	buffer = io.BytesIO()
	doc = SimpleDocTemplate(
		buffer, pagesize=letter, title=curriculum.title,
		topMargin=0.75*inch, bottomMargin=0.75*inch,
		leftMargin=0.75*inch, rightMargin=0.75*inch
	)
	story = [
		Paragraph(escape(curriculum.title), styles['Title']),
		Paragraph(escape(curriculum.description), normal_style),
		Spacer(1, 0.15*inch),
		Paragraph("Key Learning Objectives", styles['Heading2']),
		_bullets(curriculum.learning_objectives, normal_style),
	]
	for module in curriculum.modules:
		story.append(Paragraph(escape(f"Module {module.module_number}: {module.module_title}"), heading_style))
		story.append(Paragraph("Topics Covered:", label_style))
		story.append(_bullets(module.topics, normal_style))
		story.append(Paragraph("Suggested Activities:", label_style))
		story.append(_bullets(module.activities, normal_style))
	doc.build(story)
	return buffer.getvalue()


def curriculum_to_docx(curriculum: CreateCurriculumOutput) -> bytes:
	doc = Document()
	doc.add_heading(curriculum.title, 0)
	doc.add_paragraph(curriculum.description)

	doc.add_heading('Key Learning Objectives', level=1)
	for objective in curriculum.learning_objectives:
		doc.add_paragraph(objective, style='List Bullet')

	for module in curriculum.modules:
		doc.add_heading(f"Module {module.module_number}: {module.module_title}", level=2)
		p = doc.add_paragraph()
		p.add_run('Topics Covered:').bold = True
		for topic in module.topics:
			doc.add_paragraph(topic, style='List Bullet')
		p = doc.add_paragraph()
		p.add_run('Suggested Activities:').bold = True
		for activity in module.activities:
			doc.add_paragraph(activity, style='List Bullet')

	buffer = io.BytesIO()
	doc.save(buffer)
	return buffer.getvalue()
