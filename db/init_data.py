# db/init_data.py
import sys
from pathlib import Path

from dotenv import load_dotenv

from fleet_api.app.db import StoreLoadError, VehicleStore, get_data_path

# .env from the project root
load_dotenv()


def reset_data_file() -> Path:
    # Overwrites DATA_PATH with an empty fleet
    store = VehicleStore(get_data_path())
    store.persist()
    return store.path


def load_example_data() -> int:
    example_path = Path(__file__).with_name("example_data.json")
    if not example_path.exists():
        raise FileNotFoundError(f"example_data.json not found at: {example_path}")

    # Validate the example file the same way the API does at startup
    example = VehicleStore(example_path).load()
    store = VehicleStore(get_data_path(), vehicles=example.vehicles)
    store.persist()
    return len(store.vehicles)


if __name__ == "__main__":
    try:
        path = reset_data_file()
        print(f"reset {path}")
        if "--examples" in sys.argv[1:]:
            count = load_example_data()
            print(f"loaded {count} example vehicles")
    except (OSError, StoreLoadError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
