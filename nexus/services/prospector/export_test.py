"""Unit tests for CSV export."""

import csv
import io

import pytest

from nexus.services.prospector.export import EXPORT_COLUMNS, export_csv, write_csv
from nexus.services.store.models import LeadWithEnrichment


def _leads():
    return [
        LeadWithEnrichment.model_validate(
            {
                "id": 1,
                "source": "Google Maps",
                "company_name": "Sun Co",
                "email": "hi@sun.co",
                "created_at": "2026-01-01T10:00:00+00:00",
                "enrichment": [
                    {
                        "lead_id": 1,
                        "ai_score": 87.6,
                        "validated": True,
                        "enriched_email": "hi@sun.co",
                        "social_profiles": {"linkedin": "https://linkedin.com/company/sun"},
                    }
                ],
            }
        ),
        LeadWithEnrichment(id="2", source="Instagram", company_name="Moon, Ltd"),
    ]


@pytest.mark.unit
class TestWriteCsv:
    def test_rows(self):
        buf = io.StringIO()

        count = write_csv(_leads(), buf)

        assert count == 2
        rows = list(csv.DictReader(io.StringIO(buf.getvalue())))
        assert list(rows[0].keys()) == EXPORT_COLUMNS
        assert rows[0]["ai_score"] == "88"
        assert rows[0]["validated"] == "yes"
        assert rows[0]["linkedin"] == "https://linkedin.com/company/sun"
        assert rows[0]["instagram"] == ""
        assert rows[1]["company_name"] == "Moon, Ltd"
        assert rows[1]["validated"] == "no"
        assert rows[1]["ai_score"] == ""

    def test_export_to_file(self, tmp_path):
        path = tmp_path / "out" / "leads.csv"

        assert export_csv(_leads(), path) == 2
        assert path.read_text(encoding="utf-8").startswith("id,company_name,source")
