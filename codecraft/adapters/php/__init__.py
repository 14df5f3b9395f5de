from codecraft.adapters.php.adapter import PhpAdapter
from codecraft.adapters.php.editor import EditDispatcher, EditOperation, PhpDocument

__all__ = ["EditDispatcher", "EditOperation", "PhpAdapter", "PhpDocument"]
