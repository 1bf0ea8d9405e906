import json

from app.documents.models import AnalysisResult, Mismatch
from app.documents.result_decoder import decode_analysis_result


def _payload() -> dict:
    return {
        "total_records": 120,
        "mismatch_count": 1,
        "mismatch_rate": 0.0083,
        "mismatches": [
            {
                "label": "Card fee",
                "volume": 3,
                "unit_price": 1.5,
                "expected_amount": 4.5,
                "actual_amount": 6.0,
                "delta": 1.5,
            }
        ],
    }


class TestDecodeStructured:
    def test_decodes_mapping(self) -> None:
        result = decode_analysis_result(_payload())
        assert result == AnalysisResult(
            total_records=120,
            mismatch_count=1,
            mismatch_rate=0.0083,
            mismatches=[
                Mismatch(
                    label="Card fee",
                    volume=3.0,
                    unit_price=1.5,
                    expected_amount=4.5,
                    actual_amount=6.0,
                    delta=1.5,
                )
            ],
        )

    def test_accepts_camel_case_keys(self) -> None:
        payload = {
            "totalRecords": 10,
            "mismatchCount": 0,
            "mismatchRate": 0,
            "mismatches": [],
        }
        result = decode_analysis_result(payload)
        assert result is not None
        assert result.total_records == 10
        assert result.mismatches == []

    def test_missing_mismatch_count_defaults_to_list_length(self) -> None:
        payload = _payload()
        del payload["mismatch_count"]
        result = decode_analysis_result(payload)
        assert result is not None
        assert result.mismatch_count == 1


class TestDecodeText:
    def test_decodes_json_text(self) -> None:
        result = decode_analysis_result(json.dumps(_payload()))
        assert result is not None
        assert result.mismatches[0].label == "Card fee"

    def test_decodes_bytes(self) -> None:
        result = decode_analysis_result(json.dumps(_payload()).encode())
        assert result is not None
        assert result.total_records == 120

    def test_decodes_double_encoded_text(self) -> None:
        result = decode_analysis_result(json.dumps(json.dumps(_payload())))
        assert result is not None
        assert result.mismatch_rate == 0.0083


class TestDecodeMalformed:
    def test_none_is_absent(self) -> None:
        assert decode_analysis_result(None) is None

    def test_blank_text_is_absent(self) -> None:
        assert decode_analysis_result("   ") is None

    def test_invalid_json_is_absent(self) -> None:
        assert decode_analysis_result("{not json") is None

    def test_non_object_is_absent(self) -> None:
        assert decode_analysis_result([1, 2, 3]) is None

    def test_non_numeric_total_is_absent(self) -> None:
        payload = _payload()
        payload["total_records"] = "many"
        assert decode_analysis_result(payload) is None

    def test_boolean_is_not_a_number(self) -> None:
        payload = _payload()
        payload["mismatch_rate"] = True
        assert decode_analysis_result(payload) is None

    def test_mismatch_without_label_is_absent(self) -> None:
        payload = _payload()
        del payload["mismatches"][0]["label"]
        assert decode_analysis_result(payload) is None

    def test_mismatches_not_a_list_is_absent(self) -> None:
        payload = _payload()
        payload["mismatches"] = {"label": "x"}
        assert decode_analysis_result(payload) is None
