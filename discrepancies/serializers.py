from django.core.validators import ProhibitNullCharactersValidator
from rest_framework import serializers


class DocumentTextField(serializers.CharField):
    """CharField that accepts NUL characters; decoded PDF text often has them."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.validators = [
            validator for validator in self.validators
            if not isinstance(validator, ProhibitNullCharactersValidator)
        ]


class DocumentInputSerializer(serializers.Serializer):
    filename = serializers.CharField(max_length=255)
    content = DocumentTextField(allow_blank=True, trim_whitespace=False)


class DetectionRequestSerializer(serializers.Serializer):
    documents = DocumentInputSerializer(many=True, allow_empty=False)
    group = serializers.BooleanField(required=False, default=False)

    def get_document_pairs(self):
        return [
            (doc['filename'], doc['content'])
            for doc in self.validated_data['documents']
        ]
