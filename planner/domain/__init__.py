"""Domain entities: ingredients, meal templates, profiles and the week grid."""
