import logging
from io import BytesIO
from typing import Dict, List
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import letter
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, HRFlowable
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT, TA_CENTER, TA_RIGHT
from reportlab.pdfbase import pdfmetrics

logger = logging.getLogger(__name__)

ALIGNMENT_MAP = {
    "left": TA_LEFT,
    "center": TA_CENTER,
    "right": TA_RIGHT
}


def escape_attr(value: str) -> str:
    """Escapes text for use inside a double-quoted markup attribute."""
    return escape(value, {'"': "&quot;"})


def group_skills_by_category(skills: List[Dict]) -> Dict[str, List[str]]:
    """Groups skill names under their category, keeping first-seen category order."""
    grouped: Dict[str, List[str]] = {}
    for skill in skills:
        grouped.setdefault(skill.get("category") or "Other", []).append(skill.get("name", ""))
    return grouped


class PortfolioPDFGenerator:
    def __init__(self, variables: Dict):
        self.vars = variables
        self.styles = getSampleStyleSheet()
        self.base_font = self.vars.get("font_settings", {}).get("base_font_name", "Helvetica")

        self.register_font_family(self.base_font)
        self.setup_custom_styles()

    def register_font_family(self, base_font_name: str):
        try:
            if base_font_name == 'Helvetica':
                pdfmetrics.registerFontFamily('Helvetica', normal='Helvetica', bold='Helvetica-Bold', italic='Helvetica-Oblique', boldItalic='Helvetica-BoldOblique')
            elif base_font_name == 'Times-Roman':
                pdfmetrics.registerFontFamily('Times-Roman', normal='Times-Roman', bold='Times-Bold', italic='Times-Italic', boldItalic='Times-BoldItalic')
            elif base_font_name == 'Courier':
                pdfmetrics.registerFontFamily('Courier', normal='Courier', bold='Courier-Bold', italic='Courier-Oblique', boldItalic='Courier-BoldOblique')
        except Exception as e:
            logger.warning("Could not register font family %s: %s", base_font_name, e)

    def setup_custom_styles(self):
        style_vars = self.vars.get("styles", {})
        for name, properties in style_vars.items():
            if name == "horizontal_line":
                continue
            alignment = ALIGNMENT_MAP.get(str(properties.get("alignment", "left")).lower(), TA_LEFT)
            font_name = properties.get("fontName", self.base_font)
            self.styles.add(ParagraphStyle(
                name=f"Portfolio{name.capitalize()}",
                parent=self.styles['Normal'],
                fontName=font_name,
                fontSize=properties.get("fontsize", 10),
                spaceAfter=properties.get("spaceAfter", 2),
                spaceBefore=properties.get("spaceBefore", 2),
                leftIndent=properties.get("leftIndent", 0),
                bulletIndent=properties.get("bulletIndent", 0),
                alignment=alignment,
                leading=properties.get("fontsize", 10) * 1.2
            ))

    def style(self, name: str) -> ParagraphStyle:
        return self.styles[f"Portfolio{name.capitalize()}"]

    def create_contact_info(self, details: Dict) -> str:
        parts = []
        if details.get('email'): parts.append(f'<link href="mailto:{escape_attr(details["email"])}" color="black">{escape(details["email"])}</link>')
        if details.get('phone'): parts.append(escape(details['phone']))
        for key in ('linkedin', 'github', 'leetcode', 'hackerrank'):
            if details.get(key):
                url = details[key]
                parts.append(f'<link href="{escape_attr(url)}" color="black">{escape(url.split("://")[-1])}</link>')
        return ' • '.join(parts)

    def add_section_header(self, story, title):
        hr_vars = self.vars.get("styles", {}).get("horizontal_line", {})
        story.append(Paragraph(f"<b>{title.upper()}</b>", self.style('Header')))
        story.append(HRFlowable(width="100%", thickness=hr_vars.get("thickness", 0.5), color=colors.black, spaceBefore=hr_vars.get("spaceBefore", 3), spaceAfter=hr_vars.get("spaceAfter", 3)))

    def date_range(self, item: Dict) -> str:
        return escape(" - ".join(part for part in (item.get('startDate'), item.get('endDate')) if part))

    def build_story(self, data: Dict) -> List:
        story = []

        v_spaces = self.vars.get("spaces", {}).get("vertical", {})
        section_gap = v_spaces.get("section_gap_inch", 0.08) * inch
        item_gap = v_spaces.get("item_gap_inch", 0.05) * inch

        # --- Name, Title and Contact ---
        details = data.get('personalDetails') or {}
        if details.get('name'): story.append(Paragraph(f"<b>{escape(details['name'])}</b>", self.style('Name')))
        if details.get('title'): story.append(Paragraph(escape(details['title']), self.style('Title')))
        contact_line = self.create_contact_info(details)
        if contact_line: story.append(Paragraph(contact_line, self.style('Contact')))

        # --- Summary ---
        if details.get('summary'):
            self.add_section_header(story, "Summary")
            story.append(Paragraph(escape(details['summary']), self.style('Body')))
            story.append(Spacer(1, section_gap))

        # --- Experience ---
        if data.get('workExperience'):
            self.add_section_header(story, "Work Experience")
            for i, job in enumerate(data['workExperience']):
                story.append(Paragraph(f"<b>{escape(job.get('jobTitle', ''))}</b>, {escape(job.get('company', ''))} <i>({self.date_range(job)})</i>", self.style('Subheader')))
                for bullet in job.get('responsibilities') or []:
                    if bullet: story.append(Paragraph(escape(bullet), self.style('Bulleted_list'), bulletText='•'))
                if i < len(data['workExperience']) - 1: story.append(Spacer(1, item_gap))
            story.append(Spacer(1, section_gap))

        # --- Education ---
        if data.get('education'):
            self.add_section_header(story, "Education")
            for i, edu in enumerate(data['education']):
                story.append(Paragraph(f"<b>{escape(edu.get('institution', ''))}</b> <i>({self.date_range(edu)})</i>", self.style('Subheader')))
                degree_info = ", ".join(part for part in (edu.get('degree'), edu.get('fieldOfStudy')) if part)
                if degree_info: story.append(Paragraph(escape(degree_info), self.style('Body')))
                if edu.get('description'): story.append(Paragraph(escape(edu['description']), self.style('Body')))
                if i < len(data['education']) - 1: story.append(Spacer(1, item_gap))
            story.append(Spacer(1, section_gap))

        # --- Skills ---
        if data.get('skills'):
            self.add_section_header(story, "Technical Skills")
            for category, names in group_skills_by_category(data['skills']).items():
                story.append(Paragraph(f"<b>{escape(category)}:</b> " + escape(", ".join(names)), self.style('Body')))
            story.append(Spacer(1, section_gap))

        # --- Projects ---
        if data.get('projects'):
            self.add_section_header(story, "Projects")
            for i, project in enumerate(data['projects']):
                story.append(Paragraph(f"<b>{escape(project.get('name', ''))}</b>", self.style('Subheader')))
                if project.get('description'): story.append(Paragraph(escape(project['description']), self.style('Body')))
                technologies = [t for t in project.get('technologies') or [] if t]
                if technologies: story.append(Paragraph(f"<i>{escape(', '.join(technologies))}</i>", self.style('Body')))
                if project.get('link'):
                    link = project['link']
                    story.append(Paragraph(f'<link href="{escape_attr(link)}" color="blue">{escape(link)}</link>', self.style('Body')))
                if i < len(data['projects']) - 1: story.append(Spacer(1, item_gap))
            story.append(Spacer(1, section_gap))

        # --- Achievements ---
        if data.get('achievements'):
            self.add_section_header(story, "Achievements")
            for achievement in data['achievements']:
                story.append(Paragraph(f"<b>{escape(achievement.get('title', ''))}</b>: {escape(achievement.get('description', ''))}", self.style('Bulleted_list'), bulletText='•'))
            story.append(Spacer(1, section_gap))

        # --- Certifications ---
        if data.get('certifications'):
            self.add_section_header(story, "Certifications")
            for cert in data['certifications']:
                story.append(Paragraph(f"<b>{escape(cert.get('name', ''))}</b> - <i>{escape(cert.get('issuingOrganization', ''))} ({escape(cert.get('date', ''))})</i>", self.style('Subheader')))

        return story

    def generate_pdf_bytes(self, data: Dict) -> bytes:
        buffer = BytesIO()
        seo = data.get('seo') or {}
        doc = SimpleDocTemplate(buffer, pagesize=letter, rightMargin=0.5*inch, leftMargin=0.5*inch, topMargin=0.5*inch, bottomMargin=0.5*inch, title=seo.get('title', ''), subject=seo.get('description', ''))
        story = self.build_story(data)
        if not story:
            story.append(Paragraph("This portfolio is empty.", self.style('Body')))
        doc.build(story)
        logger.info("Portfolio PDF rendered (%d flowables)", len(story))
        return buffer.getvalue()
