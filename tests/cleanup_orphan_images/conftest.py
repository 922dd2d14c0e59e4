import sys
from pathlib import Path

# Para testes da limpeza, força src/triggers/cleanup_orphan_images no topo do path
_root = Path(__file__).resolve().parents[2]
trigger_path = str(_root / "src" / "triggers" / "cleanup_orphan_images")
src_path = str(_root / "src")

# Remove se já existir e reinsere no topo
for path in [trigger_path, src_path]:
    if path in sys.path:
        sys.path.remove(path)
    sys.path.insert(0, path)
