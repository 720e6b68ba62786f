"""
Achievements Configuration
Milestones unlocked from profile counters. `type` selects the counter compared
against `target`: challenge -> total_completed, xp -> total_xp, streak -> streak,
course -> number of completed course enrollments.
"""

ACHIEVEMENTS = [
    # Challenge milestones
    {"id": "fast-starter", "title": "Fast Starter", "description": "Complete 5 challenges", "target": 5, "type": "challenge"},
    {"id": "rising-star", "title": "Rising Star", "description": "Complete 10 challenges", "target": 10, "type": "challenge"},
    {"id": "dedicated-learner", "title": "Dedicated Learner", "description": "Complete 25 challenges", "target": 25, "type": "challenge"},
    {"id": "challenge-warrior", "title": "Challenge Warrior", "description": "Complete 50 challenges", "target": 50, "type": "challenge"},
    {"id": "centurion", "title": "Centurion", "description": "Complete 100 challenges", "target": 100, "type": "challenge"},

    # XP milestones
    {"id": "1k-club", "title": "1K Club", "description": "Earn 1,000 XP", "target": 1000, "type": "xp"},
    {"id": "5k-club", "title": "5K Club", "description": "Earn 5,000 XP", "target": 5000, "type": "xp"},
    {"id": "xp-legend", "title": "XP Legend", "description": "Earn 10,000 XP", "target": 10000, "type": "xp"},

    # Streak milestones
    {"id": "week-warrior", "title": "Week Warrior", "description": "7-day streak", "target": 7, "type": "streak"},
    {"id": "streak-master", "title": "Streak Master", "description": "30-day streak", "target": 30, "type": "streak"},

    # Course milestones
    {"id": "course-finisher", "title": "Course Finisher", "description": "Complete 1 course", "target": 1, "type": "course"},
    {"id": "knowledge-seeker", "title": "Knowledge Seeker", "description": "Complete 5 courses", "target": 5, "type": "course"},
]
