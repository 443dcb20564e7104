from pathlib import Path

import pytest

from agentdump.parsers import DumpParser
from agentdump.search import SearchIndex

SAMPLE_DUMP = """\
// Image 0: Assembly-CSharp.dll - 0

// Namespace: 
public class GlobalManager // TypeDefIndex: 1
{
	// Fields
	private static GlobalManager instance; // 0x0

	// Methods
	public static GlobalManager get_Instance()
	// RVA: 0x100 Offset: 0x100 VA: 0x180000100
}

// Namespace: Game
public abstract class Entity : MonoBehaviour // TypeDefIndex: 2
{
	protected int id; // 0x18
	public int Id { get; }
	public abstract void Tick(float deltaTime)
	// RVA: -1 Offset: -1 Slot: 4
}

// Namespace: Game
public class Player : Entity, IDamageable // TypeDefIndex: 3
{
	public int health; // 0x20
	public float speed; // 0x24
	public void Jump()
	// RVA: 0x1000 Offset: 0x2000 VA: 0x3000 Slot: 5
	public override void Tick(float deltaTime)
	// RVA: 0x1010 Offset: 0x2010 VA: 0x3010 Slot: 4
	public bool TakeDamage(int amount, Vector3 hitPoint)
	// RVA: 0x1020 Offset: 0x2020 VA: 0x3020
}

// Namespace: Game.Data
public class ItemDatabase : ScriptableObject // TypeDefIndex: 4
{
	public List<Item> items; // 0x18
}

// Namespace: Game
public enum DamageType // TypeDefIndex: 5
{
	public int value__; // 0x0
	public const DamageType Physical = 0;
	public const DamageType Fire = 1;
}

// Namespace: Game
public interface IDamageable // TypeDefIndex: 6
{
	public abstract bool TakeDamage(int amount, Vector3 hitPoint)
	// RVA: -1 Offset: -1 Slot: 0
}

// Namespace: Game
public struct HitInfo // TypeDefIndex: 7
{
	public Vector3 point; // 0x0
	public float damage; // 0xC
}
"""


@pytest.fixture
def sample_classes():
    return DumpParser().parse_text(SAMPLE_DUMP)


@pytest.fixture
def sample_index(sample_classes):
    return SearchIndex(sample_classes)


@pytest.fixture
def dump_dir(tmp_path) -> Path:
    """Folder laid out like an Il2CppDumper output directory."""
    (tmp_path / "dump.cs").write_text(SAMPLE_DUMP, encoding="utf-8")
    return tmp_path


@pytest.fixture
def sample_dump() -> str:
    return SAMPLE_DUMP
