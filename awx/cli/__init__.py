"""
awx/cli - Click CLI 진입점과 터미널 UI
"""
