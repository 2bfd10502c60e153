from storyprep.cli import main

main()
