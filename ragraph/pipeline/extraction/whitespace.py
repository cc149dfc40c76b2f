"""In-process fallback extractor."""

from ragraph.models import Extraction
from ragraph.pipeline.extraction.base import RelationExtractor


class WhitespaceTokenizer(RelationExtractor):
    """Splits on whitespace and never yields triplets. Always available."""

    name = "whitespace"

    async def extract(self, text: str) -> Extraction:
        return self.tokenize(text)

    @staticmethod
    def tokenize(text: str) -> Extraction:
        return Extraction(tokens=text.split(), triplets=[])
