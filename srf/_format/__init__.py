"""
Internal format engine for SRF containers.

Layout constants and struct definitions live in ``spec``, the data model in
``document`` and the decoder in ``reader``. Import the public names from
``srf`` rather than from here.
"""

from srf._format.spec import MAGIC, HEADER_STRUCT, RESOURCE_STRUCT, ITEM_STRUCT
from srf._format.document import SrfData, SrfHeader, SrfResource
from srf._format.reader import SrfReader, decode
