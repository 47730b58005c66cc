# bubblelab - Helpers shared by the dashboard pages
