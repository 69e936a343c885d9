"""
Simulation tuning knobs.
"""

# Runtime pacing
DELTA_T = 1.0 / 30.0  # seconds per tick

# Environment
WORLD_W, WORLD_H = 980, 720
ENVIRONMENT_NOISE = 0.05  # std-dev of multiplicative wheel noise

# Body geometry (fractions of body width/height)
AGENT_SIZE = 12.0
SENSOR_SEPARATION = 0.4
SENSOR_FRONT_BACK_PLACEMENT = 0.5
MOTOR_SEPARATION = 0.5
MOTOR_FRONT_BACK_PLACEMENT = 0.25

# Movement/actuation
MOTOR_SPEED = 600.0
MOTOR_FRICTION = 0.1
MASS_SCALE = 0.01

# Signal field
SIGNAL_RADIUS = 1.0
SIGNAL_INTENSITY = 1.0

# Mutation
NEW_SYNAPSE_MUTATION_RATE = 0.2
NEW_NEURON_MUTATION_RATE = 0.05
RANDOM_WEIGHT_MUTATION_RATE = 0.1
RANDOM_BIAS_MUTATION_RATE = 0.05
RANDOM_THRESHOLD_MUTATION_RATE = 0.05

# Fitness
COLLISION_PENALTY = 20.0
CATCH_REWARD = 20.0
FOOD_REWARD = 200.0
HAZARD_PENALTY = 100.0
CLUSTER_SCALE = 100.0
MIN_CLUSTER_DISTANCE = 1e-3
