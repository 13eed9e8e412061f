# ===== src/services/pdf_generator.py =====

import io
from xml.sax.saxutils import escape
from typing import List, Dict, Any
from datetime import datetime
from zoneinfo import ZoneInfo
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, KeepTogether
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY

from src.core.config import settings
from src.models.surat_enums import JenisSurat
from src.models.penduduk_enums import JenisKelamin


class SuratPDFGenerator:
    """Service untuk generate PDF surat keterangan desa (A4 portrait)."""

    def __init__(self):
        self.page_width, self.page_height = A4
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _format_date_indonesia(self, date_obj) -> str:
        """Format tanggal ke format Indonesia: 15 Agustus 2025"""
        if not date_obj:
            return "-"

        if isinstance(date_obj, str):
            date_obj = datetime.fromisoformat(date_obj.replace('Z', '+00:00')).date()

        months = [
            '', 'Januari', 'Februari', 'Maret', 'April', 'Mei', 'Juni',
            'Juli', 'Agustus', 'September', 'Oktober', 'November', 'Desember'
        ]

        return f"{date_obj.day} {months[date_obj.month]} {date_obj.year}"

    def _setup_custom_styles(self):
        """Setup custom styles untuk surat."""

        # Kop surat
        self.styles.add(ParagraphStyle(
            name='KopSurat',
            parent=self.styles['Normal'],
            fontSize=13,
            fontName='Helvetica-Bold',
            alignment=TA_CENTER,
            leading=16
        ))

        self.styles.add(ParagraphStyle(
            name='TitleSurat',
            parent=self.styles['Title'],
            fontSize=13,
            fontName='Helvetica-Bold',
            alignment=TA_CENTER,
            spaceAfter=2,
            spaceBefore=12
        ))

        self.styles.add(ParagraphStyle(
            name='NomorSurat',
            parent=self.styles['Normal'],
            fontSize=10,
            fontName='Helvetica',
            alignment=TA_CENTER,
            spaceAfter=12
        ))

        self.styles.add(ParagraphStyle(
            name='BodyText11',
            parent=self.styles['Normal'],
            fontSize=11,
            fontName='Helvetica',
            alignment=TA_JUSTIFY,
            leading=16
        ))

        self.styles.add(ParagraphStyle(
            name='Signature',
            parent=self.styles['Normal'],
            fontSize=11,
            fontName='Helvetica',
            alignment=TA_CENTER,
            leading=14
        ))

    def generate_surat_pdf(self, surat_data: Dict[str, Any], penduduk_data: Dict[str, Any]) -> bytes:
        """Generate PDF surat yang sudah disetujui."""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2*cm,
            leftMargin=2.5*cm,
            topMargin=1.5*cm,
            bottomMargin=2*cm,
            title=surat_data.get('nomor_surat') or 'Surat'
        )

        story = []
        story.extend(self._build_kop_surat())
        story.extend(self._build_title(surat_data))
        story.extend(self._build_body(surat_data, penduduk_data))
        story.extend(self._build_signature_section(surat_data))

        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _build_kop_surat(self) -> List[Any]:
        """Kop surat desa dengan garis bawah tebal."""
        elements = []

        kop_text = (
            f"PEMERINTAH {settings.DESA_KABUPATEN.upper()}<br/>"
            f"KECAMATAN {settings.DESA_KECAMATAN.upper()}<br/>"
            f"{settings.DESA_NAMA.upper()}"
        )
        kop_table = Table([[Paragraph(kop_text, self.styles['KopSurat'])]], colWidths=[16.5*cm])
        kop_table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LINEBELOW', (0, 0), (-1, -1), 2, colors.black),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
        ]))

        elements.append(kop_table)
        elements.append(Spacer(1, 0.5*cm))
        return elements

    def _build_title(self, surat_data: Dict[str, Any]) -> List[Any]:
        elements = []
        title = JenisSurat.get_display_name(JenisSurat(surat_data["jenis_surat"]).value).upper()
        elements.append(Paragraph(f"<u>{title}</u>", self.styles['TitleSurat']))
        elements.append(Paragraph(f"Nomor: {surat_data.get('nomor_surat') or '-'}", self.styles['NomorSurat']))
        return elements

    def _build_body(self, surat_data: Dict[str, Any], penduduk_data: Dict[str, Any]) -> List[Any]:
        """Pembuka, tabel identitas pemohon, dan keperluan."""
        elements = []

        elements.append(Paragraph(
            f"Yang bertanda tangan di bawah ini Kepala {settings.DESA_NAMA}, "
            f"Kecamatan {settings.DESA_KECAMATAN}, {settings.DESA_KABUPATEN}, menerangkan bahwa:",
            self.styles['BodyText11']
        ))
        elements.append(Spacer(1, 0.4*cm))

        tempat_lahir = penduduk_data.get('tempat_lahir') or '-'
        tanggal_lahir = self._format_date_indonesia(penduduk_data.get('tanggal_lahir'))
        jenis_kelamin = penduduk_data.get('jenis_kelamin')

        alamat = penduduk_data.get('alamat') or '-'
        if penduduk_data.get('rt') and penduduk_data.get('rw'):
            alamat = f"{alamat} RT {penduduk_data['rt']}/RW {penduduk_data['rw']}"

        info_data = [
            ['Nama', ':', penduduk_data.get('nama') or '-'],
            ['NIK', ':', penduduk_data.get('nik') or '-'],
            ['Tempat/Tgl. Lahir', ':', f"{tempat_lahir}, {tanggal_lahir}"],
            ['Jenis Kelamin', ':', JenisKelamin.get_display_name(jenis_kelamin) if jenis_kelamin else '-'],
            ['Agama', ':', penduduk_data.get('agama') or '-'],
            ['Pekerjaan', ':', penduduk_data.get('pekerjaan') or '-'],
            ['Alamat', ':', Paragraph(escape(alamat), self.styles['BodyText11'])],
        ]

        info_table = Table(info_data, colWidths=[4.5*cm, 0.5*cm, 11.5*cm])
        info_table.setStyle(TableStyle([
            ('FONTSIZE', (0, 0), (-1, -1), 11),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('ALIGN', (1, 0), (1, -1), 'CENTER'),
            ('LEFTPADDING', (0, 0), (0, -1), 1*cm),
        ]))
        elements.append(info_table)
        elements.append(Spacer(1, 0.4*cm))

        elements.append(Paragraph(
            "Orang tersebut di atas adalah benar warga desa kami. "
            f"Surat keterangan ini dibuat untuk keperluan: <b>{escape(surat_data.get('keperluan') or '-')}</b>.",
            self.styles['BodyText11']
        ))
        elements.append(Spacer(1, 0.3*cm))
        elements.append(Paragraph(
            "Demikian surat keterangan ini dibuat untuk dapat dipergunakan sebagaimana mestinya.",
            self.styles['BodyText11']
        ))
        elements.append(Spacer(1, 1*cm))

        return elements

    def _build_signature_section(self, surat_data: Dict[str, Any]) -> List[Any]:
        """Tanda tangan kepala desa di sisi kanan."""
        elements = []

        tanggal = surat_data.get('tanggal_disetujui')
        if not tanggal:
            tanggal = datetime.now(ZoneInfo(settings.TIMEZONE))
        if isinstance(tanggal, datetime):
            tanggal = tanggal.date()

        location_date = f"{settings.DESA_NAMA}, {self._format_date_indonesia(tanggal)}"

        signature_data = [
            ["", Paragraph(location_date, self.styles['Signature'])],
            ["", Paragraph(f"Kepala {settings.DESA_NAMA}", self.styles['Signature'])],
            ["", ""],
            ["", ""],
            ["", ""],
            ["", Paragraph(f"<u><b>{settings.KEPALA_DESA_NAMA}</b></u>", self.styles['Signature'])],
        ]

        signature_table = Table(signature_data, colWidths=[9*cm, 7.5*cm])
        signature_table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ALIGN', (1, 0), (1, -1), 'CENTER'),
            ('TOPPADDING', (0, 0), (-1, -1), 0),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 0),
            ('TOPPADDING', (0, 2), (-1, 4), 12),
        ]))

        elements.append(KeepTogether([signature_table]))
        return elements
