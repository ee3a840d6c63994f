from .paths import normalize_path, is_within_allowed, is_forbidden_extension
from .files import scan_dir_tree, read_bounded
from .roots import add_root, remove_root, set_active_root, apply_root_action
from .system import env_info, probe_version
