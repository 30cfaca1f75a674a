"""
Dice Arena

Core modules:
- engine: per-die step loop and roll orchestration (one thread per die)
- collision: wall/corner detection and bounce tables
- aggregator: single consumer of die updates, owns the state table
- resolver: reduces settled faces to a result (normal/advantage/disadvantage/percentile)
"""
