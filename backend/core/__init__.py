from core.catalog_reader import read_catalog  # noqa: F401
from core.legacy_miner import load_legacy_schema, mine_legacy_schema  # noqa: F401
from core.reconciler import reconcile  # noqa: F401
from core.synthesizer import synthesize  # noqa: F401
from core.resource_generator import build_resource, generate_resource  # noqa: F401
