"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# RobotState fields
ROBOT_ID = "robot_id"
TIMESTAMP = "timestamp"
JOINTS = "joints"

# JointState fields
NAME = "name"
ANGLE = "angle_rad"
VELOCITY = "velocity_rad_s"
TORQUE = "torque_nm"

# The fixed six degree-of-freedom joint schema. Position in this tuple is
# position on the wire.
JOINT_NAMES = (
    "shoulder_pan",
    "shoulder_lift",
    "elbow",
    "wrist_1",
    "wrist_2",
    "wrist_3",
)

JOINT_COUNT = len(JOINT_NAMES)

TIMESTAMP_MAX = 2 ** 64 - 1

DEFAULT_TOPIC = "robot_joints"
DEFAULT_ROBOT_ID = "robot_arm_001"
