import csv
import io
import logging
import time

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django.http import HttpResponse

from .detection import run_detection
from .serializers import DetectionRequestSerializer
from .services.parallel import DetectionTimeout

logger = logging.getLogger(__name__)


class DiscrepancyViewSet(viewsets.ViewSet):
    """
    Stateless discrepancy detection over already-decoded documents.
    Nothing is persisted; every request carries its own documents.
    """

    def _detect(self, request):
        serializer = DetectionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = run_detection(serializer.get_document_pairs())
        return serializer, report

    def _timeout_response(self, exc):
        logger.warning(f"Detection request timed out: {exc}")
        return Response(
            {'error': str(exc)},
            status=status.HTTP_504_GATEWAY_TIMEOUT
        )

    @action(detail=False, methods=['post'])
    def detect(self, request):
        """
        Detect date, entity and amount discrepancies between documents.
        Body: {"documents": [{"filename": ..., "content": ...}], "group": false}
        """
        try:
            serializer, report = self._detect(request)
        except DetectionTimeout as exc:
            return self._timeout_response(exc)

        data = report.to_dict(include_groups=serializer.validated_data['group'])
        data['detectedAt'] = time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime())
        return Response(data)

    @action(detail=False, methods=['post'], url_path='export-csv')
    def export_csv(self, request):
        """
        Download the findings for the posted documents as CSV.
        One row per finding, in detection order.
        """
        try:
            _, report = self._detect(request)
        except DetectionTimeout as exc:
            return self._timeout_response(exc)

        output = io.StringIO()
        writer = csv.writer(output)

        # Header row
        writer.writerow([
            'Type',
            'Severity',
            'File A',
            'Value A',
            'File B',
            'Value B',
        ])

        for finding in report.findings:
            writer.writerow([
                finding.kind.value,
                finding.severity.value,
                finding.source_file,
                finding.source_value,
                finding.comparison_file,
                finding.comparison_value,
            ])

        response = HttpResponse(output.getvalue(), content_type='text/csv')
        response['Content-Disposition'] = 'attachment; filename="discrepancies.csv"'
        if report.truncated:
            response['X-Discrepancies-Truncated'] = 'true'
        return response
