from discrepancies.conf import EngineConfig
from discrepancies.detection import DetectionReport, parse_documents, run_detection
from discrepancies.services.value_extractor import ExtractedValues, ValueExtractor


def test_parse_documents_keeps_input_order(contract_text, amended_text):
    parsed = parse_documents([('b.txt', amended_text), ('a.txt', contract_text)])
    assert [doc.filename for doc in parsed] == ['b.txt', 'a.txt']


def test_run_detection_report(contract_text, amended_text):
    report = run_detection(
        [('contract.txt', contract_text), ('amended.txt', amended_text)],
        EngineConfig(),
    )
    assert report.document_count == 2
    assert report.pair_count == 1
    assert report.truncated is False
    assert report.by_type == {'date': 1, 'entity': 1, 'amount': 8}
    assert report.by_severity == {'medium': 1, 'high': 1, 'critical': 8}


def test_run_detection_with_one_document(contract_text):
    report = run_detection([('contract.txt', contract_text)], EngineConfig())
    assert report.findings == []
    assert report.to_dict()['summary'] == {'total': 0, 'bySeverity': {}, 'byType': {}}


def test_run_detection_with_custom_extractor():
    class NamesOnly(ValueExtractor):
        def extract_values(self, text):
            return ExtractedValues(entities=tuple(text.split(';')))

    report = run_detection(
        [('a.txt', 'Jon Smith;Acme'), ('b.txt', 'John Smith;Acme')],
        EngineConfig(),
        extractor=NamesOnly(),
    )
    assert [(f.source_value, f.comparison_value) for f in report.findings] == [('Jon Smith', 'John Smith')]


def test_report_to_dict_with_groups(contract_text, amended_text):
    report = run_detection(
        [('a.txt', contract_text), ('b.txt', amended_text), ('c.txt', amended_text)],
        EngineConfig(max_workers=2),
    )
    data = report.to_dict(include_groups=True)

    assert data['documentCount'] == 3
    assert data['pairCount'] == 3
    # b.txt and c.txt are identical, so only in-document format pairs differ there
    assert data['summary']['total'] == len(data['discrepancies']) == 24
    assert sorted(group['count'] for group in data['groups']) == [1] * 4 + [2] * 10


def test_empty_report_dict():
    assert DetectionReport().to_dict() == {
        'discrepancies': [],
        'summary': {'total': 0, 'bySeverity': {}, 'byType': {}},
        'documentCount': 0,
        'pairCount': 0,
        'truncated': False,
    }
