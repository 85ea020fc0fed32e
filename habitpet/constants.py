"""
Tuning constants for the creature life simulation.

All game mechanics read their numbers from here so balancing changes stay in
one place. Values are plain ints; durations are expressed in hours unless the
name says otherwise.
"""

# --- STAT LIMITS ---
STAT_MIN = 0
STAT_MAX = 100

# --- INITIAL CREATURE ---
INITIAL_HEALTH = 100
INITIAL_HAPPINESS = 100
INITIAL_CLEANLINESS = 100
INITIAL_HUNGER = 100
INITIAL_LEVEL = 1
INITIAL_FOOD_COUNT = 10
INITIAL_POOP_COUNT = 0

# --- FEEDING ---
FEED_HUNGER_BOOST = 20
FEED_HAPPINESS_BOOST = 10
FEED_REVIVAL_HEALTH = 30

# --- CLEANING ---
CLEAN_CLEANLINESS_BOOST = 30
CLEAN_HAPPINESS_BOOST = 15
CLEAN_POOP_BONUS_CLEANLINESS = 20
CLEAN_POOP_BONUS_HAPPINESS = 10

# --- PETTING ---
PET_HAPPINESS_BOOST = 15
PET_HEALTH_BOOST = 5
PET_COOLDOWN_SECONDS = 5 * 60

# --- HABIT COMPLETION ---
HABIT_BASE_HAPPINESS = 10
HABIT_BASE_HEALTH = 5
HABIT_MAX_STREAK_BONUS = 10
HABIT_REVIVAL_MIN_HEALTH = 20
HABIT_MIN_HEALTH = 60
HABIT_MIN_HAPPINESS = 70
HABIT_MIN_HUNGER = 50

# Food reward per completion, keyed by streak threshold (highest match wins)
FOOD_REWARD_SHORT = 1
FOOD_REWARD_MEDIUM = 2
FOOD_REWARD_LONG = 3
FOOD_REWARD_MEDIUM_STREAK = 3
FOOD_REWARD_LONG_STREAK = 7

# --- TIME INTERVALS (hours) ---
POOP_INTERVAL_HOURS = 24
HEALTH_DECAY_INTERVAL_HOURS = 12
RECENT_HABIT_WINDOW_HOURS = 24
DEGRADATION_INTERVAL_HOURS = 1

# --- POOP SYSTEM ---
MAX_POOP = 5
TOXIC_POOP_THRESHOLD = 5
POOP_CLEANLINESS_PENALTY = 15

# --- HEALTH DECAY (no habit activity) ---
BASE_HEALTH_LOSS = 20
BASE_HAPPINESS_LOSS = 15
TOXIC_HEALTH_LOSS = 35
TOXIC_HAPPINESS_LOSS = 25

# --- HOURLY DEGRADATION ---
HUNGER_GRACE_HOURS = 6
CLEANLINESS_GRACE_HOURS = 12
MAX_HOURLY_HUNGER_LOSS = 10
MAX_HOURLY_CLEANLINESS_LOSS = 8
LOW_STAT = 30
CRITICAL_STAT = 20

# (min completion ratio, health change, happiness change), checked top-down
COMPLETION_RATE_EFFECTS = (
    (0.8, 2, 3),
    (0.5, 0, 1),
    (0.2, -3, -5),
    (0.0, -6, -10),
)
NO_HABITS_EFFECT = (-2, -3)
LOW_HUNGER_PENALTY = (-3, -5)
LOW_CLEANLINESS_PENALTY = (-2, -3)

# --- STREAK TIERS ---
STREAK_TIER_SPARKLES = 3
STREAK_TIER_FIRE = 7
STREAK_TIER_GEM = 14
STREAK_TIER_TROPHY = 30

# --- WARNINGS ---
HAPPY_THRESHOLD = 80
MANY_POOPS = 3
