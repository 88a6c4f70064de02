# services/reporting.py

"""
Service untuk generate reports dari hasil diagnosis.

Menyediakan fungsi untuk:
- Generate TXT reports
- Export ke CSV (pandas)
- Generate PDF reports (fpdf2)
"""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from ..core.models import DiagnosisResult, Symptom


def _latin1(text: str) -> str:
    """Font inti PDF hanya mendukung latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")


class ReportingService:
    """Kelas untuk menghasilkan laporan dari hasil diagnosis."""

    def __init__(self, output_dir: str = "reports"):
        """Initialize ReportingService.

        Args:
            output_dir: Direktori untuk menyimpan reports
        """
        os.makedirs(output_dir, exist_ok=True)
        self.output_dir = output_dir

    def _generate_filename(self, extension: str) -> str:
        """Membuat nama file unik berdasarkan timestamp."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        return os.path.join(self.output_dir, f"diagnosis_{timestamp}.{extension}")

    def result_rows(self, result: DiagnosisResult) -> List[Dict[str, Any]]:
        """Satu baris per penyebab (rank, cause, probability, actions)."""
        return [
            {
                "rank": rank,
                "cause": cause.cause,
                "probability": cause.probability,
                "actions": "; ".join(cause.actions),
            }
            for rank, cause in enumerate(result.causes, start=1)
        ]

    def generate_txt_report(
        self,
        result: DiagnosisResult,
        symptoms: Optional[Sequence[Symptom]] = None,
    ) -> str:
        """
        Membuat laporan TXT dari hasil diagnosis.

        Returns:
            str: Path ke file laporan yang telah dibuat.
        """
        filepath = self._generate_filename("txt")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write("=" * 40 + "\n")
            f.write("      NETWORK DIAGNOSIS REPORT\n")
            f.write("=" * 40 + "\n")
            f.write(f"Date: {datetime.now().strftime('%d-%m-%Y %H:%M:%S')}\n")
            f.write(f"Engine: {result.system_type.value}\n\n")

            f.write("REPORTED SYMPTOMS:\n")
            if symptoms:
                for symptom in symptoms:
                    f.write(f"  - {symptom.label}\n")
            else:
                f.write("  (none)\n")

            if result.certainty is not None:
                f.write(f"\nCertainty: {result.certainty:.1f}%\n")

            f.write("\n" + "=" * 40 + "\n\n")

            if not result.has_evidence:
                f.write("RESULT: No cause could be inferred from the measurements.\n\n")

            for rank, cause in enumerate(result.causes, start=1):
                probability = f" ({cause.probability}%)" if cause.probability is not None else ""
                f.write(f"{rank}. {cause.cause}{probability}\n")
                for action in cause.actions:
                    f.write(f"     * {action}\n")
                f.write("\n")

            if result.applied_rules:
                f.write("=" * 40 + "\n")
                f.write("--- APPLIED RULES (HOW) ---\n")
                f.write("=" * 40 + "\n\n")
                for applied in result.applied_rules:
                    row = applied.to_row()
                    f.write(
                        f"  - {row['rule']}: {row['match']} match [{row['present']}] "
                        f"-> {row['cause']}\n"
                    )

        return filepath

    def generate_csv_report(self, result: DiagnosisResult) -> str:
        """Export ranking penyebab ke CSV."""
        filepath = self._generate_filename("csv")
        df = pd.DataFrame(
            self.result_rows(result),
            columns=["rank", "cause", "probability", "actions"],
        )
        df.to_csv(filepath, index=False)
        return filepath

    def generate_pdf_report(
        self,
        result: DiagnosisResult,
        symptoms: Optional[Sequence[Symptom]] = None,
    ) -> str:
        """
        Membuat laporan PDF dari hasil diagnosis.

        Returns:
            str: Path ke file laporan yang telah dibuat.
        """
        filepath = self._generate_filename("pdf")
        pdf = FPDF()
        pdf.add_page()

        def line(height: float, text: str, align: str = "L") -> None:
            pdf.cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT, align=align)

        pdf.set_font("Helvetica", 'B', 16)
        line(10, "Network Diagnosis Report", "C")
        pdf.set_font("Helvetica", '', 10)
        line(5, f"Date: {datetime.now().strftime('%d-%m-%Y %H:%M:%S')}", "C")
        line(5, f"Engine: {result.system_type.value}", "C")
        pdf.ln(5)

        pdf.set_font("Helvetica", 'B', 11)
        line(8, "Reported symptoms:")
        pdf.set_font("Helvetica", '', 11)
        if symptoms:
            pdf.multi_cell(0, 5, _latin1(", ".join(s.label for s in symptoms)), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        else:
            line(5, "(none)")
        pdf.ln(5)

        if not result.has_evidence:
            pdf.set_font("Helvetica", 'BI', 12)
            line(10, "No cause could be inferred from the measurements.")
            pdf.ln(3)

        if result.certainty is not None:
            pdf.set_font("Helvetica", 'B', 11)
            line(8, f"Certainty: {result.certainty:.1f}%")
            pdf.ln(3)

        for rank, cause in enumerate(result.causes, start=1):
            probability = f" ({cause.probability}%)" if cause.probability is not None else ""
            pdf.set_font("Helvetica", 'B', 12)
            line(8, f"{rank}. {cause.cause}{probability}")
            pdf.set_font("Helvetica", '', 10)
            for action in cause.actions:
                pdf.multi_cell(0, 5, _latin1(f"  - {action}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(2)

        if result.applied_rules:
            pdf.set_font("Helvetica", 'B', 11)
            line(8, "Applied rules:")
            pdf.set_font("Helvetica", '', 10)
            pdf.multi_cell(0, 5, _latin1(", ".join(f"R{r.rule_id}" for r in result.applied_rules)))

        pdf.output(filepath)
        return filepath
